"""
Session glue: credential check, MFA gate and scenario selection.
"""

"""
Copyright (c) 2025 Firefly Software Solutions Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at:

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from .controller import (
    STATUS_LOGIN_FAILED,
    STATUS_LOGIN_SUCCESSFUL,
    STATUS_MFA_FAILED,
    STATUS_MFA_REQUIRED,
    AuthOutcome,
    CredentialVerifier,
    SessionController,
)

__all__ = [
    "STATUS_LOGIN_FAILED",
    "STATUS_LOGIN_SUCCESSFUL",
    "STATUS_MFA_FAILED",
    "STATUS_MFA_REQUIRED",
    "AuthOutcome",
    "CredentialVerifier",
    "SessionController",
]
