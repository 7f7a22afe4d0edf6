import uvicorn

from .config import AppSettings


def run():
    settings = AppSettings()
    uvicorn.run("verifier.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
