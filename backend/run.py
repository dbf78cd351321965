import uvicorn

from eventscale.core.config import API_HOST, API_PORT

if __name__ == "__main__":
    uvicorn.run(
        "eventscale.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True
    )
