from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional

from .catalog import normalize_phrase


class CommandInfo(BaseModel):
    phrase: str
    name: str
    description: str
    command: str


class CommandEntry(BaseModel):
    """One user-defined trigger phrase from the commands YAML file."""
    phrase: str
    name: str
    description: str = ""
    key: Optional[str] = None
    command: Optional[str] = None

    @field_validator("phrase")
    @classmethod
    def _normalize_phrase(cls, v: str) -> str:
        v = normalize_phrase(v)
        if not v:
            raise ValueError("phrase must not be empty")
        return v

    @model_validator(mode="after")
    def _key_or_command(self):
        if (self.key is None) == (self.command is None):
            raise ValueError("exactly one of 'key' or 'command' is required")
        if self.command is not None and not self.command.strip():
            raise ValueError("command must not be empty")
        return self


class ResolveResult(BaseModel):
    found: bool
    query: str
    phrase: Optional[str] = None
    strategy: Optional[str] = None  # "containment" | "token_overlap"
    command: Optional[CommandInfo] = None
    reason: Optional[str] = None
    available: Optional[List[str]] = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    content: List[TextContent]
    isError: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=f"Error: {message}")], isError=True)


class ToolDefinition(BaseModel):
    name: str
    description: str
    inputSchema: dict = Field(default_factory=dict)
