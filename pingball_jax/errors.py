from typing import Optional


def _format_with_context(message: str, line: Optional[int], text: Optional[str]) -> str:
    if line is None:
        return message
    details = [f"Location: line {line}"]
    if text:
        details.append(f"Code: {text.strip()}")
    return f"{message}\n" + "\n".join(details)


class BoardError(Exception):
    """Base error for board files. Every subclass aborts the whole parse."""

    def __init__(self, message: str, *, line: Optional[int] = None,
                 text: Optional[str] = None):
        super().__init__(_format_with_context(message, line, text))
        self.line = line
        self.text = text


class BoardSyntaxError(BoardError):
    """Raised when a line does not match the board grammar."""


class DeclarationError(BoardError):
    """Raised when a well-formed declaration carries an invalid value."""

    def __init__(self, message: str, *, field: Optional[str] = None,
                 line: Optional[int] = None, text: Optional[str] = None):
        super().__init__(message, line=line, text=text)
        self.field = field


class UnresolvedReferenceError(BoardError):
    """Raised when a fire line names a gadget not declared above it."""

    def __init__(self, name: str, *, line: Optional[int] = None,
                 text: Optional[str] = None):
        super().__init__(f"Unknown gadget '{name}'", line=line, text=text)
        self.name = name


class DuplicateNameError(BoardError):
    """Raised when a declaration reuses a name that is already taken."""

    def __init__(self, name: str, *, line: Optional[int] = None,
                 text: Optional[str] = None):
        super().__init__(f"Name '{name}' is already declared", line=line, text=text)
        self.name = name
