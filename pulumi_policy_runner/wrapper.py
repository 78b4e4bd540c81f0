#!/usr/bin/env python3
#
# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Wrapper for standard Pulumi CLI that attaches a policy pack to each deployment command"""

from typing import Callable, Dict, List, Mapping, Optional, Sequence, TextIO, Tuple

import os
import sys
import shlex
import subprocess
import colorama # type: ignore[import]
from colorama import Fore, Style

# NOTE: this module runs with -m; do not use relative imports
from pulumi_policy_runner.config import ResolvedConfig, HelpRequested, resolve_config
from pulumi_policy_runner.constants import (
    DEBUG_ENV_VAR,
    PULUMI_HOME_ENV_VAR,
    PULUMI_PROG_NAME,
  )
from pulumi_policy_runner.exceptions import (
    PolicyRunnerError,
    ConfigurationError,
    CmdExitError,
  )

PROG_NAME = 'pulumi-policy-run'

USAGE = f"""
Pulumi Policy Check Wrapper

Usage:
  {PROG_NAME} [options] [command] [args]

Options:
  --policy-dir <dir>   Path to the policy pack directory
  --project-dir <dir>  Path to the Pulumi project directory
  --stack <stack>      Pulumi stack name
  --help, -h           Show this help text

Environment Variables:
  POLICY_DIR           Path to the policy pack directory
  PULUMI_PROJECT_DIR   Path to the Pulumi project directory
  PULUMI_STACK         Pulumi stack name

Priority order: Command-line arguments > Environment variables > Default values

Commands:
  preview              Run pulumi preview with policy enforcement (default)
  up                   Run pulumi up with policy enforcement
  refresh              Run pulumi refresh with policy enforcement
  destroy              Run pulumi destroy with policy enforcement

Any other arguments are passed through to pulumi unchanged.

Examples:
  {PROG_NAME} --policy-dir ./my-policies --project-dir ./my-project preview
  {PROG_NAME} --project-dir ./infrastructure --stack dev up
  POLICY_DIR=./policies PULUMI_PROJECT_DIR=./project PULUMI_STACK=dev {PROG_NAME} preview
"""

Spawner = Callable[[str, List[str], str], int]
"""spawner(binary, args, cwd) -> exit code. The child inherits stdin/stdout/stderr."""

def spawn_process(binary: str, args: List[str], cwd: str) -> int:
  cmd = [ binary ] + args
  try:
    result = subprocess.call(cmd, cwd=cwd)
  except FileNotFoundError as ex:
    raise PolicyRunnerError(f"Unable to locate {binary} executable; is the Pulumi CLI installed and in PATH?") from ex
  return result

def is_colorizable(stream: TextIO) -> bool:
  is_a_tty = hasattr(stream, 'isatty') and stream.isatty()
  return is_a_tty

def normalize_exit_code(exit_code: int) -> int:
  # subprocess reports death by signal N as -N
  if exit_code < 0:
    return 128 - exit_code
  return exit_code

class PolicyWrapper:
  _config: ResolvedConfig
  _env: Dict[str, str]
  _spawner: Spawner
  _debug: bool = False
  _colorize_stderr: bool = False

  def __init__(
        self,
        config: ResolvedConfig,
        env: Optional[Mapping[str, str]]=None,
        spawner: Optional[Spawner]=None,
        debug: Optional[bool]=None,
      ):
    self._config = config
    if env is None:
      env = os.environ
    self._env = dict(env)
    self._spawner = spawn_process if spawner is None else spawner
    self._debug = self._env.get(DEBUG_ENV_VAR, '') != '' if debug is None else debug

  @property
  def config(self) -> ResolvedConfig:
    return self._config

  @property
  def env(self) -> Dict[str, str]:
    return self._env

  @property
  def is_debug(self) -> bool:
    return self._debug

  @property
  def pulumi_prog(self) -> str:
    pulumi_home = self._env.get(PULUMI_HOME_ENV_VAR, '')
    if pulumi_home != '':
      pulumi_prog = os.path.join(pulumi_home, 'bin', PULUMI_PROG_NAME)
      if os.path.exists(pulumi_prog):
        return pulumi_prog
    return PULUMI_PROG_NAME

  def ecolor(self, codes: str) -> str:
    return codes if self._colorize_stderr else ""

  def log(self, msg: str, color: str=Style.RESET_ALL) -> None:
    print(f"{self.ecolor(color)}{msg}{self.ecolor(Style.RESET_ALL)}", file=sys.stderr)

  def init_color(self) -> None:
    # Only stderr carries wrapper output; the child writes to stdout directly
    self._colorize_stderr = is_colorizable(sys.stderr)
    if self._colorize_stderr:
      colorama.init(wrap=False)
      new_stream = colorama.AnsiToWin32(sys.stderr)
      if new_stream.should_wrap():
        sys.stderr = new_stream

  def print_banner(self) -> None:
    config = self._config
    self.log("=== Pulumi Policy Check Wrapper ===", Fore.BLUE)
    self.log(f"Policy Pack: {config.policy_pack_name}", Fore.BLUE)
    self.log(f"Policy Directory: {config.policy_dir}", Fore.BLUE)
    self.log(f"Project Directory: {config.project_dir}", Fore.BLUE)
    if not config.stack is None:
      self.log(f"Stack: {config.stack}", Fore.BLUE)
    self.log("\nConfiguration sources:", Fore.CYAN)
    self.log(f"Policy Directory: {config.get_source('policy_dir')}", Fore.CYAN)
    self.log(f"Project Directory: {config.get_source('project_dir')}", Fore.CYAN)
    self.log(f"Stack: {config.get_source('stack')}", Fore.CYAN)

  def get_missing_dirs(self) -> List[Tuple[str, str]]:
    """Returns a (description, path) pair for each required directory that does not exist.

    Both directories are always checked so that all problems are reported in a single run.
    """
    config = self._config
    missing: List[Tuple[str, str]] = []
    if not os.path.isdir(config.policy_dir):
      missing.append(("Policy pack directory", config.policy_dir))
    if not os.path.isdir(config.project_dir):
      missing.append(("Pulumi project directory", config.project_dir))
    return missing

  def require_dirs(self) -> None:
    missing = self.get_missing_dirs()
    if len(missing) > 0:
      raise ConfigurationError(
          '\n'.join(f"{desc} not found: {path}" for desc, path in missing),
          missing_dirs=[ path for _, path in missing ],
        )

  def get_pulumi_args(self) -> List[str]:
    """Returns the arguments that follow the pulumi subcommand.

    --stack is injected ahead of the passthrough arguments unless the caller already
    passed one through, and --policy-pack is always appended last.
    """
    config = self._config
    args = config.passthrough_args
    if not config.stack is None and not '--stack' in args:
      self.log(f"Adding stack parameter: {config.stack}", Fore.CYAN)
      args = [ '--stack', config.stack ] + args
    args += [ '--policy-pack', config.policy_dir ]
    return args

  def do_cmd(self) -> int:
    config = self._config
    self.require_dirs()
    args = [ config.command ] + self.get_pulumi_args()
    pulumi_prog = self.pulumi_prog
    self.log(f"Running Pulumi {config.command} with policy checks...", Fore.YELLOW)
    self.log(f"Running command: {pulumi_prog} {' '.join(shlex.quote(x) for x in args)}", Fore.BLUE)
    if self.is_debug:
      print(f"Invoking pulumi command {[ pulumi_prog ] + args} in {config.project_dir}", file=sys.stderr)
    result = normalize_exit_code(self._spawner(pulumi_prog, args, config.project_dir))
    if result == 0:
      self.log(f"✅ {config.command} completed successfully with no policy violations", Fore.GREEN)
    else:
      self.log(f"❌ {config.command} failed or policy violations detected", Fore.RED)
    return result

  def call(self) -> int:
    self.init_color()
    self.print_banner()
    try:
      result = self.do_cmd()
    except ConfigurationError as ex:
      for line in str(ex).splitlines():
        self.log(f"Error: {line}", Fore.RED)
      result = 1
    except Exception as ex:
      if isinstance(ex, CmdExitError):
        result = ex.exit_code
      else:
        result = 1
      if result != 0:
        if self.is_debug:
          raise
        print(f"{self.ecolor(Fore.RED)}{PROG_NAME}: error: {ex}{self.ecolor(Style.RESET_ALL)}", file=sys.stderr)
    return result

def run_policy_wrapper(
      arglist: Sequence[str],
      env: Optional[Mapping[str, str]]=None,
      cwd: Optional[str]=None,
      install_dir: Optional[str]=None,
      spawner: Optional[Spawner]=None,
    ) -> int:
  """Resolves configuration and runs pulumi with the policy pack attached.

  Returns:
      int: The exit code that would be returned if this were run as a standalone command.
  """
  if env is None:
    env = dict(os.environ)
  debug = env.get(DEBUG_ENV_VAR, '') != ''
  try:
    config = resolve_config(arglist, env=env, cwd=cwd, install_dir=install_dir)
  except Exception as ex:
    if debug:
      raise
    print(f"{PROG_NAME}: error: {ex}", file=sys.stderr)
    return 1
  if isinstance(config, HelpRequested):
    print(USAGE)
    return 0
  return PolicyWrapper(config, env=env, spawner=spawner, debug=debug).call()
