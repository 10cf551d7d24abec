from typing import Any, Type

from pydantic import BaseModel, ConfigDict, Field


class CommitProposal(BaseModel):
    """The title and description the model proposes for the commit."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, description="The title of the commit.")
    description: str = Field(
        description="An exhaustive description of the changes."
    )

    def render(self) -> str:
        return f"{self.title}\n\n{self.description}"

    def __str__(self) -> str:
        return self.render()


class ChangeSet(BaseModel):
    """Staged paths and the staged diff, read once per run."""

    model_config = ConfigDict(frozen=True)

    paths: tuple[str, ...] = ()
    raw_diff: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.paths and not self.raw_diff.strip()

    def render(self) -> str:
        files = "\n".join(self.paths)
        return f"Changed files:\n{files}\n\nDiff:\n{self.raw_diff}"


class ToolContract(BaseModel):
    """A function declared to the chat model."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @classmethod
    def for_model(
        cls, name: str, description: str, model: Type[BaseModel]
    ) -> "ToolContract":
        """Declare a tool whose arguments are exactly *model*'s fields."""

        return cls(
            name=name,
            description=description,
            parameters=model.model_json_schema(),
        )

    def to_openai_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
