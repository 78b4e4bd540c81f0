# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by pulumi_policy_runner"""

from typing import Tuple

PULUMI_COMMANDS: Tuple[str, ...] = ('preview', 'up', 'refresh', 'destroy')
DEFAULT_PULUMI_COMMAND: str = 'preview'

POLICY_DIR_ENV_VAR: str = 'POLICY_DIR'
PROJECT_DIR_ENV_VAR: str = 'PULUMI_PROJECT_DIR'
STACK_ENV_VAR: str = 'PULUMI_STACK'
PULUMI_HOME_ENV_VAR: str = 'PULUMI_HOME'
DEBUG_ENV_VAR: str = 'PULUMI_POLICY_RUNNER_DEBUG'

DEFAULT_POLICY_DIRNAME: str = 'pulumiPolicy'
DEFAULT_PROJECT_DIRNAME: str = 'pulumiTemplate'

PULUMI_PROG_NAME: str = 'pulumi'

SOURCE_COMMAND_LINE: str = 'command-line'
SOURCE_ENVIRONMENT: str = 'environment'
SOURCE_DEFAULT: str = 'default'
SOURCE_UNSET: str = 'unset'
