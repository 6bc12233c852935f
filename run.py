#!/usr/bin/env python3
"""Startup script for the Insight Engine API"""
import os
import sys
import argparse
import logging
from pathlib import Path

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

def check_environment() -> bool:
    """Load .env and report whether the remote insight service is configured"""
    from dotenv import load_dotenv
    env_file = Path('.env')
    if env_file.exists():
        load_dotenv(env_file)
    else:
        logger.info(".env file not found; reading configuration from the environment only.")

    if os.getenv('USE_LLM', 'true').lower() != 'true':
        logger.info("USE_LLM=false: questions are answered by the local heuristic.")
        return False

    if not os.getenv('OPENAI_API_KEY'):
        logger.warning("OPENAI_API_KEY not set: questions are answered by the local heuristic.")
        logger.info("To enable remote insights add to .env: OPENAI_API_KEY=your_key_here")
        return False

    return True

def run_server(host='0.0.0.0', port=8000, reload=False):
    """Run the FastAPI server"""
    import uvicorn
    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(
        "web.backend.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )

def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Insight Engine")
    parser.add_argument('--host', default='0.0.0.0', help='Host to bind to')
    parser.add_argument('--port', type=int, default=8000, help='Port to bind to')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload for development')
    parser.add_argument('--skip-checks', action='store_true', help='Skip environment checks')

    args = parser.parse_args()

    if not args.skip_checks:
        remote = check_environment()
        logger.info(f"Remote insights {'enabled' if remote else 'disabled'}")

    # Print startup info
    logger.info("="*60)
    logger.info("Insight Engine Starting Up")
    logger.info("="*60)
    logger.info(f"API Documentation: http://localhost:{args.port}/docs")
    logger.info("="*60)

    run_server(args.host, args.port, args.reload)

if __name__ == "__main__":
    sys.exit(main())
