"""
콘솔 출력 헬퍼

진행 상황은 stdout, 오류는 stderr로 색상을 입혀 출력합니다.
리포지토리 이름이나 API 메시지에 포함된 대괄호가 rich 마크업으로
해석되지 않도록 markup/highlight를 끕니다.

GitHub Actions 로그는 TTY가 아니지만 ANSI 색상을 표시하므로,
GITHUB_ACTIONS 또는 FORCE_COLOR가 설정되면 색상 출력을 강제합니다.
"""
import os

from rich.console import Console


def color_forced() -> bool:
    return os.getenv("GITHUB_ACTIONS") == "true" or bool(os.getenv("FORCE_COLOR"))


def make_console(stderr: bool = False, file=None) -> Console:
    if color_forced():
        return Console(
            file=file,
            stderr=stderr,
            highlight=False,
            soft_wrap=True,
            force_terminal=True,
            color_system="standard",
        )
    return Console(file=file, stderr=stderr, highlight=False, soft_wrap=True)


stdout = make_console()
stderr = make_console(stderr=True)


def _print(console: Console, message: str, style: str) -> None:
    console.print(message, style=style, markup=False, emoji=False)


def info(message: str) -> None:
    _print(stdout, message, "blue")


def heading(message: str) -> None:
    _print(stdout, message, "magenta")


def success(message: str) -> None:
    _print(stdout, message, "green")


def warning(message: str) -> None:
    _print(stderr, message, "yellow")


def notice(message: str) -> None:
    """stdout에 노란색으로 출력 (오류가 아닌 분기 안내용)"""
    _print(stdout, message, "yellow")


def error(message: str) -> None:
    _print(stderr, message, "red")
