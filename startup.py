import os
import sys
import uvicorn
import logging
import traceback

# Configure logging to stdout (Azure App Service reads from here)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

print("=" * 60, flush=True)
print("ABC Retailers Startup", flush=True)
print("=" * 60, flush=True)
logger.info("ABC Retailers Startup")
python_version = sys.version.split()[0]
print(f"Python version: {python_version}", flush=True)
logger.info(f"Python version: {python_version}")

# Log critical environment variables (without exposing full secrets)
print("\nEnvironment Configuration:", flush=True)
for name in ("PORT", "APP_ENV", "LOG_LEVEL", "LOG_FORMAT"):
    value = os.environ.get(name, 'not set')
    print(f"  {name}: {value}", flush=True)
    logger.info(f"  {name}: {value}")
storage_conn = (
    '✅ set'
    if os.environ.get('AZURE_STORAGE_CONNECTION_STRING') or os.environ.get('ConnectionStrings__AzureStorage')
    else '❌ not set'
)
print(f"  AZURE_STORAGE_CONNECTION_STRING: {storage_conn}", flush=True)
logger.info(f"  AZURE_STORAGE_CONNECTION_STRING: {storage_conn}")

if __name__ == "__main__":
    try:
        print("Step 1: Loading application settings...", flush=True)
        logger.info("Step 1: Loading application settings...")
        try:
            from abcretailers.core.config import get_settings
            settings = get_settings()
            print(f"✅ Settings loaded: {settings.app_name} v{settings.app_version} ({settings.app_env})", flush=True)
            logger.info(f"✅ Settings loaded: {settings.app_name} v{settings.app_version} ({settings.app_env})")
        except ValueError as ve:
            error_msg = f"❌ Configuration validation failed: {ve}"
            print(error_msg, flush=True)
            logger.error(error_msg)
            print("\n⚠️  Common configuration issues:", flush=True)
            print("  1. AZURE_STORAGE_CONNECTION_STRING must start with 'DefaultEndpointsProtocol='", flush=True)
            print("  2. APP_ENV must be development, staging, production or testing", flush=True)
            sys.exit(1)

        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)

        print("Step 2: Importing abcretailers.app...", flush=True)
        logger.info("Step 2: Importing abcretailers.app...")
        try:
            from abcretailers.app import app  # noqa: F401
            print("✅ Successfully imported abcretailers.app", flush=True)
            logger.info("✅ Successfully imported abcretailers.app")
        except Exception as import_error:
            error_msg = f"❌ Failed to import abcretailers.app: {import_error}"
            print(error_msg, flush=True)
            logger.error(error_msg)
            tb = traceback.format_exc()
            print(tb, flush=True)
            logger.error(tb)
            sys.exit(1)

        sep = "=" * 60
        print(f"\n{sep}", flush=True)
        print(f"Step 3: Starting uvicorn server on {host}:{port}...", flush=True)
        print(f"{sep}\n", flush=True)
        logger.info(f"Step 3: Starting uvicorn server on {host}:{port}...")
        uvicorn.run(
            "abcretailers.app:app",
            host=host,
            port=port,
            workers=1,
            log_level="info",
            access_log=True,
            # Add timeout settings for Azure App Service
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        msg = "\n⚠️  Shutting down due to keyboard interrupt"
        print(msg, flush=True)
        logger.info(msg)
        sys.exit(0)
    except Exception as e:
        sep = "=" * 60
        print(f"\n{sep}", flush=True)
        print("❌ CRITICAL: Failed to start application", flush=True)
        print(f"Error: {e}", flush=True)
        print(f"Error type: {type(e).__name__}", flush=True)
        tb = traceback.format_exc()
        print(tb, flush=True)
        print("Troubleshooting steps:", flush=True)
        print("1. Check Azure App Service logs (Log stream) for detailed errors", flush=True)
        print("2. Verify the storage account connection string and network access", flush=True)
        print("3. Check if the app is binding to the correct port (should be 0.0.0.0:8000)", flush=True)
        print(f"{sep}\n", flush=True)
        logger.error(f"❌ CRITICAL: Failed to start application: {e}")
        logger.error(tb)
        sys.exit(1)
