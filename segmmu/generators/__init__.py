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

"""Random stimulus generation for the segmented MMU.

Modules
-------
transaction_generator
    TransactionGenerator: seeded descriptor configurations (with optional
    injected overlaps) and weighted-random bus cycles steered toward
    configured segments; ``segments_overlap`` configuration check.
"""

from segmmu.generators.transaction_generator import (
    TransactionGenerator,
    address_in_segment,
    segments_overlap,
)

__all__ = [
    "TransactionGenerator",
    "address_in_segment",
    "segments_overlap",
]
