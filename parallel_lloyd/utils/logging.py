import logging
from typing import Any, Dict, Optional, TextIO

LOGGER_NAME = "parallel_lloyd"
# threadName помогает отличать сообщения воркеров пула
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(threadName)s: %(message)s"


def setup_logger(
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Настраивает логгер ``parallel_lloyd``.

    Повторный вызов не добавляет второй обработчик, а только меняет уровень.

    :param level: минимальный уровень логирования
    :param stream: поток вывода; по умолчанию sys.stderr
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)

    logger.propagate = False
    return logger


def format_problem_prefix(meta: Dict[str, Any]) -> str:
    """
    Формирует текстовый префикс для логов по размерам задачи.

    Ожидается словарь с ключами ``N``, ``D``, ``K`` и опциональным
    ``workers``.
    """
    prefix = f"[N={meta['N']} D={meta['D']} K={meta['K']}"
    if meta.get("workers") is not None:
        prefix += f" workers={meta['workers']}"
    return prefix + "]"
