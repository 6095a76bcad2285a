# Copyright 2026 Pramod Kumar Voola
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

# -----------------------------------------------------------------------------
# DOMAIN MODELS - LOCATIONS & OUTCOMES
# -----------------------------------------------------------------------------
# TempLocation names the isolated workspace of one deployment attempt.
# Ok / SoftError are the results of filesystem primitives whose failures
# are tolerated: a SoftError is a value, never a raised exception.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, Field


class TempLocation(BaseModel):
    """
    Where one deployment attempt lives on disk.

    destination is always <temp root>/<instance_id>. Instances are
    immutable once built.
    """

    instance_id: str = Field(..., min_length=1, description="Opaque id of the deployment attempt")
    destination: str = Field(..., min_length=1, description="Absolute path of the temp workspace")

    class Config:
        """Locations never change after allocation."""

        frozen = True


@dataclass(frozen=True)
class Ok:
    """The primitive completed."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SoftError:
    """The primitive failed, and the caller decides whether that matters."""

    error: OSError

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return str(self.error)


Outcome = Union[Ok, SoftError]
