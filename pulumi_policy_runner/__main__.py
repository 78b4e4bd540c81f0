#!/usr/bin/env python3
#
# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""pulumi-policy-run CLI"""

from typing import Optional, Sequence

import sys

# NOTE: this module runs with -m; do not use relative imports
from pulumi_policy_runner.wrapper import run_policy_wrapper

def run(argv: Optional[Sequence[str]]=None) -> int:
  if argv is None:
    argv = sys.argv[1:]
  rc = run_policy_wrapper(argv)
  return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == '__main__':
  sys.exit(run())
