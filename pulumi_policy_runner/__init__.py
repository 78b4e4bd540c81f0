# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package pulumi_policy_runner runs the Pulumi CLI with a policy pack attached
"""

from .version import __version__

from .exceptions import (
    PolicyRunnerError,
    ConfigurationError,
    CmdExitError,
  )

from .config import (
    ResolvedConfig,
    HelpRequested,
    resolve_config,
    get_install_dir,
  )

from .wrapper import (
    PolicyWrapper,
    Spawner,
    spawn_process,
    run_policy_wrapper,
    USAGE,
  )
