"""Run the relay server with uvicorn."""
import uvicorn
from nihongo_kaiwa.core.config import settings


def main():
    print(f"Server running at http://localhost:{settings.PORT}")
    print("Press Ctrl+C to stop the server")
    uvicorn.run(
        "nihongo_kaiwa.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
