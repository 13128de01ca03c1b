import uvicorn

from mockapi.config import settings


def main():
    uvicorn.run("mockapi.main:app", host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    main()
