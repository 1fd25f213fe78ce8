from .step_10_precondition import PreconditionStep
from .step_20_provision import ProvisionDirectoriesStep
from .step_30_tooling import InstallToolingStep
from .step_40_fetch_relocate import FetchAndRelocateStep
from .step_50_configure import ConfigureStep

__all__ = [
    "PreconditionStep",
    "ProvisionDirectoriesStep",
    "InstallToolingStep",
    "FetchAndRelocateStep",
    "ConfigureStep",
]
