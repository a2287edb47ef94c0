from loguru import logger

CONSOLE_FORMAT = "{message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"


def setup_console_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(lambda msg: print(msg, end=""), level=level.upper(), format=CONSOLE_FORMAT)


def add_file_logging(path: str, level: str = "DEBUG") -> int:
    return logger.add(path, level=level.upper(), format=FILE_FORMAT, rotation="10 MB", encoding="utf-8")
