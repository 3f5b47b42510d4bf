import logging
from typing import Any, Dict


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает корневой логгер проекта ``dkmeans``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("dkmeans")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_run_prefix(meta: Dict[str, Any]) -> str:
    """
    Формирует текстовый префикс для логов по параметрам запуска.

    Ожидается словарь с ключами ``N``, ``D``, ``K`` и опциональным ``source``.
    """
    return (
        f"[N={meta['N']} D={meta['D']} K={meta['K']} "
        f"source={meta.get('source', 'file')}]"
    )


class PrefixedLogger(logging.LoggerAdapter):
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger, prefix: str) -> None:
        super().__init__(base_logger, {"prefix": prefix})

    def process(self, msg: Any, kwargs: Any) -> Any:
        return f"{self.extra['prefix']} {msg}", kwargs
