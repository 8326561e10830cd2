"""Instance context handed to a driver.

Bundles the collaborators a driver borrows during lifecycle calls: the
provisioner (for ``converge``) and the test-suite commands (for ``setup``
and ``verify``).  Runtime state is *not* stored here; callers pass it to
each lifecycle call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sshdriver.lifecycle.provisioner import ProvisionerBase

if TYPE_CHECKING:
    from sshdriver.lifecycle.provisioner import Provisioner


@dataclass(frozen=True)
class TestSuite:
    """Remote test-runner (busser) commands.  ``None`` steps are skipped."""

    __test__ = False  # not a pytest test class

    setup_cmd: str | None = None
    sync_cmd: str | None = None
    run_cmd: str | None = None


@dataclass
class Instance:
    """A named test instance and its collaborators."""

    name: str
    provisioner: Provisioner = field(default_factory=ProvisionerBase)
    suite: TestSuite = field(default_factory=TestSuite)

    def __str__(self) -> str:
        return f"<{self.name}>"
