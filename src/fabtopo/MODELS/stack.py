# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Models for a stack: a named deployment and its ordered members.
"""
from typing import Annotated, Any, Dict, List

import yaml
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


def _path_segment(value: str) -> str:
    # Stack names and member ids become single directory and volume name components
    if value in ('.', '..') or '/' in value or '\\' in value or ':' in value:
        raise ValueError(f"{value!r} must be a single path segment without '/', '\\' or ':'")
    return value


PathSegment = Annotated[str, Field(min_length=1), AfterValidator(_path_segment)]


class Member(BaseModel):
    """
    A participant in the network. The id names every per-member resource.
    """
    model_config = ConfigDict(frozen=True)

    id: PathSegment


class Stack(BaseModel):
    """
    A named deployment unit. Member order is join order and is preserved
    in every generated topology.
    """
    model_config = ConfigDict(frozen=True)

    name: PathSegment
    members: List[Member] = []

    @field_validator('members', mode='before')
    @classmethod
    def _coerce_members(cls, value: Any) -> Any:
        # Members may be written as bare ids in stack files
        if isinstance(value, (list, tuple)):
            return [{'id': m} if isinstance(m, str) else m for m in value]
        return value

    @field_validator('members')
    @classmethod
    def _unique_member_ids(cls, members: List[Member]) -> List[Member]:
        seen = set()
        for member in members:
            if member.id in seen:
                raise ValueError(f"duplicate member id: {member.id}")
            seen.add(member.id)
        return members

    @property
    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stack":
        """
        Builds a stack from a parsed description.

        :param data: Mapping with ``name`` and optional ``members``.
        :return: The validated stack.
        """
        return cls.model_validate(data or {})

    @classmethod
    def from_file(cls, path: str) -> "Stack":
        """
        Loads a stack description from a YAML file.

        :param path: Path to the stack file.
        :return: The validated stack.
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)
