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

"""Bus-cycle encoding utilities.

This package turns descriptor-level intent (load this descriptor, read that
status word, translate this address) into the pin-level bus cycles the unit
consumes.

Modules
-------
register_map
    Register-access address packing, status word encoding/decoding, and
    builders for register read/write and translate cycles.

Usage
-----
To load a descriptor into segment 1 through the bus::

    from segmmu.encoders.register_map import descriptor_write_sequence

    for inputs in descriptor_write_sequence(1, descriptor):
        mmu.clock(inputs)
"""

from segmmu.encoders.register_map import (
    register_address,
    decode_register_address,
    encode_status,
    decode_status,
    register_read,
    register_write,
    translate_access,
    descriptor_write_sequence,
    descriptor_read_sequence,
)

__all__ = [
    "register_address",
    "decode_register_address",
    "encode_status",
    "decode_status",
    "register_read",
    "register_write",
    "translate_access",
    "descriptor_write_sequence",
    "descriptor_read_sequence",
]
