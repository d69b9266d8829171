# Copyright 2025 KTTC AI (https://github.com/kttc-ai)
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

"""Exception hierarchy for locontext.

A missing backing file is not an error: stores load as empty. Everything
else that goes wrong while reading or writing a store surfaces as one of
the exceptions below.
"""

from __future__ import annotations


class LocontextError(Exception):
    """Base exception for locontext errors."""

    pass


class StoreError(LocontextError):
    """Base exception for persistence failures."""

    pass


class StoreDecodeError(StoreError, ValueError):
    """Raised when a persisted store document is malformed."""

    pass


class StoreWriteError(StoreError, OSError):
    """Raised when a store cannot be written to disk."""

    pass


class ConfigurationError(LocontextError, ValueError):
    """Raised when settings are out of range or inconsistent."""

    pass
