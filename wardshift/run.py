"""
WardShift Backend Runner
"""

import uvicorn
from wardshift.core.config import Config


def main():
    """Run the WardShift backend server."""
    uvicorn.run(
        "wardshift.api.main:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=Config.DEBUG,
        log_level=Config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
