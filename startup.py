import os
import sys
import uvicorn
import logging

# Configure logging to stdout until the app installs its own handlers
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

logger.info("=" * 60)
logger.info("MediRecords Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")

# Log critical environment variables (without exposing secrets)
logger.info(f"  PORT: {os.environ.get('PORT', '8000')}")
logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
logger.info(f"  MONGO_URI: {'✅ set' if os.environ.get('MONGO_URI') else '❌ not set'}")
logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")
logger.info(f"  API_KEYS: {'✅ set' if os.environ.get('API_KEYS') else '❌ not set'}")
logger.info(f"  AUDIT_POLICY: {os.environ.get('AUDIT_POLICY', 'strict')}")


if __name__ == "__main__":
    from medirecords.core.config import get_settings

    settings = get_settings()
    port = int(os.environ.get("PORT", settings.port))
    logger.info(f"Starting uvicorn on {settings.host}:{port}")
    uvicorn.run(
        "medirecords.app:app",
        host=settings.host,
        port=port,
        log_level=settings.logging.level.lower(),
        reload=settings.is_development and settings.debug,
    )
