from __future__ import annotations


class BookseedError(RuntimeError):
    pass


class ConfigurationError(BookseedError):
    def __init__(self, missing: tuple[str, ...] = (), detail: str | None = None):
        self.missing = tuple(missing)
        self.detail = detail
        super().__init__("; ".join(self.messages()))

    def messages(self) -> list[str]:
        out = [f"Required environment variable was not provided: {name}." for name in self.missing]
        if self.detail:
            out.append(f"Invalid configuration: {self.detail}")
        return out


class DatabaseConnectionError(BookseedError):
    pass


class StatementExecutionError(BookseedError):
    def __init__(self, sql: str):
        self.sql = sql
        super().__init__(f"statement failed: {sql}")


class InvalidBookError(BookseedError, ValueError):
    pass
