# -*- coding: utf-8 -*-
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class ResultKind(enum.Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class DecodingResult:
    """One state of a decode attempt.

    `text` is set for SUCCESS only, `message` for ERROR only.
    """
    kind: ResultKind
    text: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def loading(cls) -> "DecodingResult":
        return cls(ResultKind.LOADING)

    @classmethod
    def success(cls, text: str) -> "DecodingResult":
        return cls(ResultKind.SUCCESS, text=text)

    @classmethod
    def error(cls, message: str) -> "DecodingResult":
        return cls(ResultKind.ERROR, message=message)

    @property
    def is_loading(self) -> bool:
        return self.kind is ResultKind.LOADING

    @property
    def is_success(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.kind is ResultKind.ERROR

    @property
    def is_terminal(self) -> bool:
        return self.kind is not ResultKind.LOADING

    def __str__(self) -> str:
        if self.is_success:
            return f"Success({self.text})"
        if self.is_error:
            return f"Error({self.message})"
        return "Loading"
