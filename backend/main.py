import os

from dotenv import load_dotenv
import uvicorn

load_dotenv()

if __name__ == '__main__':
    uvicorn.run(
        "app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
