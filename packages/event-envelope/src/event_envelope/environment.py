from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentFacts(Protocol):
    @property
    def runtime(self) -> str: ...

    @property
    def function_name(self) -> str: ...

    @property
    def function_memory_size(self) -> str: ...

    @property
    def function_version(self) -> str: ...

    @property
    def region(self) -> str: ...


@dataclass(frozen=True)
class StaticEnvironmentFacts:
    runtime: str = ""
    function_name: str = ""
    function_memory_size: str = ""
    function_version: str = ""
    region: str = ""


class LambdaEnvironment(BaseSettings):
    """Execution environment facts published by the AWS Lambda runtime.

    Values are read once, when the object is created. Unset variables read
    as empty strings.
    """

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    AWS_EXECUTION_ENV: str = ""
    AWS_LAMBDA_FUNCTION_NAME: str = ""
    AWS_LAMBDA_FUNCTION_MEMORY_SIZE: str = ""
    AWS_LAMBDA_FUNCTION_VERSION: str = ""
    AWS_REGION: str = ""

    @property
    def runtime(self) -> str:
        return self.AWS_EXECUTION_ENV

    @property
    def function_name(self) -> str:
        return self.AWS_LAMBDA_FUNCTION_NAME

    @property
    def function_memory_size(self) -> str:
        return self.AWS_LAMBDA_FUNCTION_MEMORY_SIZE

    @property
    def function_version(self) -> str:
        return self.AWS_LAMBDA_FUNCTION_VERSION

    @property
    def region(self) -> str:
        return self.AWS_REGION


def load_environment_facts() -> LambdaEnvironment:
    return LambdaEnvironment()
