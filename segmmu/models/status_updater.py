#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Status flag side effects of a successful translation.

Status Updater
==============

Applied only when a translate-mode access matched exactly one enabled
descriptor, and committed at the clock edge like any other register write:

    - U is set on every such access
    - D is set on every write access
    - F is set on a write to a write-protected (WP=1) descriptor

The update is a monotonic OR: the unit never clears U, D or F (software
does that through register access), and never touches E, WP or the opaque
index field.
"""

from segmmu.config import FIELD_STATUS, STATUS_DIRTY, STATUS_FAULT, STATUS_USED
from segmmu.models.register_file import SegmentDescriptor, SegmentRegisterFile
from segmmu.models.translation import TranslationResult


def updated_status(descriptor: SegmentDescriptor, is_write: bool) -> int:
    """Return the status word after an access to this descriptor."""
    status = descriptor.status | STATUS_USED
    if is_write:
        status |= STATUS_DIRTY
        if descriptor.write_protected:
            status |= STATUS_FAULT
    return status


def apply_status_update(
    register_file: SegmentRegisterFile, result: TranslationResult, is_write: bool
) -> bool:
    """Stage the status update for a translation, if it produced one.

    Args:
        register_file: Register file to stage the write into
        result: Outcome of the translation this cycle
        is_write: True for a write access

    Returns:
        True if a status write was staged
    """
    if result.seg_fault or result.segment is None:
        return False
    descriptor = register_file.descriptor(result.segment)
    register_file.write(
        result.segment, FIELD_STATUS, updated_status(descriptor, is_write)
    )
    return True
