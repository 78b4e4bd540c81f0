#
# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional, List

class PolicyRunnerError(Exception):
  """Base class for all error exceptions defined by this package."""
  #pass

class ConfigurationError(PolicyRunnerError):
  """A directory required to run pulumi with a policy pack does not exist."""
  missing_dirs: List[str]

  def __init__(self, msg: str, missing_dirs: Optional[List[str]]=None):
    super().__init__(msg)
    self.missing_dirs = [] if missing_dirs is None else list(missing_dirs)

class CmdExitError(PolicyRunnerError):
  exit_code: int

  def __init__(self, exit_code: int, msg: Optional[str]=None):
    if msg is None:
      msg = f"Command exited with return code {exit_code}"
    super().__init__(msg)
    self.exit_code = exit_code
