import sys
import logging
from config import SystemConfig
from cli import run
from utils.logging_config import setup_logging


def main():
    """Main application entry point"""
    # Load configuration
    config = SystemConfig.load()

    # Setup logging
    setup_logging(config)
    logger = logging.getLogger(__name__)
    logger.info("Starting Image Comparer")

    exit_code = run(sys.argv[1:], config=config)
    logger.info("Finished with exit code %d", exit_code)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
