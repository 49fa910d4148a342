import os


def _int_env(name, default):
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


PROMPT = os.getenv("MINISHELL_PROMPT", "> ")
MAX_COMMAND_LENGTH = _int_env("MINISHELL_MAX_LINE", 1024)  # Giới hạn độ dài một dòng lệnh
MAX_BG_JOBS = _int_env("MINISHELL_MAX_JOBS", 100)  # Số job nền được theo dõi
