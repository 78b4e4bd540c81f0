#
# Copyright (c) 2022 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Resolution of pulumi_policy_runner configuration from the command line and environment.

Each setting is taken from, in order of priority:

  1. An explicit command-line flag (--policy-dir, --project-dir, --stack)
  2. An environment variable (POLICY_DIR, PULUMI_PROJECT_DIR, PULUMI_STACK)
  3. A computed default

Resolution is a pure function of its inputs; nothing is read from the process
environment unless the caller passes it in.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Union

import os

from .constants import (
    PULUMI_COMMANDS,
    DEFAULT_PULUMI_COMMAND,
    POLICY_DIR_ENV_VAR,
    PROJECT_DIR_ENV_VAR,
    STACK_ENV_VAR,
    DEFAULT_POLICY_DIRNAME,
    DEFAULT_PROJECT_DIRNAME,
    SOURCE_COMMAND_LINE,
    SOURCE_ENVIRONMENT,
    SOURCE_DEFAULT,
    SOURCE_UNSET,
  )

HELP_FLAGS = ('--help', '-h')

def get_install_dir() -> str:
  """Returns the directory this package is installed in; default policy pack and project dirs are relative to it."""
  return os.path.dirname(os.path.abspath(__file__))

class HelpRequested:
  """Returned by resolve_config() in place of a configuration when usage help was requested."""

  def __repr__(self) -> str:
    return "HelpRequested()"

class ResolvedConfig:
  _policy_dir: str
  _project_dir: str
  _stack: Optional[str]
  _command: str
  _passthrough_args: List[str]
  _sources: Dict[str, str]

  def __init__(
        self,
        policy_dir: str,
        project_dir: str,
        stack: Optional[str]=None,
        command: str=DEFAULT_PULUMI_COMMAND,
        passthrough_args: Optional[Sequence[str]]=None,
        sources: Optional[Mapping[str, str]]=None,
      ):
    if not command in PULUMI_COMMANDS:
      raise ValueError(f"Unsupported pulumi command '{command}'; expected one of {', '.join(PULUMI_COMMANDS)}")
    self._policy_dir = os.path.abspath(policy_dir)
    self._project_dir = os.path.abspath(project_dir)
    self._stack = stack
    self._command = command
    self._passthrough_args = [] if passthrough_args is None else list(passthrough_args)
    self._sources = {} if sources is None else dict(sources)

  @property
  def policy_dir(self) -> str:
    return self._policy_dir

  @property
  def project_dir(self) -> str:
    return self._project_dir

  @property
  def stack(self) -> Optional[str]:
    return self._stack

  @property
  def command(self) -> str:
    return self._command

  @property
  def passthrough_args(self) -> List[str]:
    return list(self._passthrough_args)

  @property
  def sources(self) -> Dict[str, str]:
    return dict(self._sources)

  @property
  def policy_pack_name(self) -> str:
    return os.path.basename(self._policy_dir)

  def get_source(self, name: str) -> str:
    return self._sources.get(name, SOURCE_DEFAULT)

  def __repr__(self) -> str:
    return (
        f"ResolvedConfig(policy_dir={self._policy_dir!r}, project_dir={self._project_dir!r}, "
        f"stack={self._stack!r}, command={self._command!r}, passthrough_args={self._passthrough_args!r})"
      )

def _abspath(cwd: str, path: str) -> str:
  return os.path.abspath(os.path.join(cwd, os.path.expanduser(path)))

def resolve_config(
      argv: Sequence[str],
      env: Optional[Mapping[str, str]]=None,
      cwd: Optional[str]=None,
      install_dir: Optional[str]=None,
    ) -> Union[ResolvedConfig, HelpRequested]:
  """Resolves the effective wrapper configuration.

  Args:
      argv (Sequence[str]):
          Commandline arguments, NOT including the program as argv[0].
      env (Optional[Mapping[str, str]], optional):
          Environment variables to consult. None uses os.environ. Defaults to None.
      cwd (Optional[str], optional):
          Directory that relative paths and the local ./pulumiPolicy default are
          resolved against. None uses the process working directory. Defaults to None.
      install_dir (Optional[str], optional):
          Directory the fallback pulumiPolicy and pulumiTemplate defaults live in.
          None uses the package install directory. Defaults to None.

  Returns:
      Union[ResolvedConfig, HelpRequested]: The resolved configuration, or HelpRequested
          if --help or -h appears anywhere in argv.
  """
  argv = list(argv)
  if env is None:
    env = os.environ
  if cwd is None:
    cwd = os.getcwd()
  cwd = os.path.abspath(os.path.expanduser(cwd))
  if install_dir is None:
    install_dir = get_install_dir()

  for arg in argv:
    if arg in HELP_FLAGS:
      return HelpRequested()

  sources: Dict[str, str] = {}

  # Empty environment values are treated as unset
  policy_dir: Optional[str] = env.get(POLICY_DIR_ENV_VAR, '') or None
  project_dir: Optional[str] = env.get(PROJECT_DIR_ENV_VAR, '') or None
  stack: Optional[str] = env.get(STACK_ENV_VAR, '') or None
  sources['policy_dir'] = SOURCE_ENVIRONMENT if not policy_dir is None else SOURCE_DEFAULT
  sources['project_dir'] = SOURCE_ENVIRONMENT if not project_dir is None else SOURCE_DEFAULT
  sources['stack'] = SOURCE_ENVIRONMENT if not stack is None else SOURCE_UNSET

  command = DEFAULT_PULUMI_COMMAND
  passthrough_args: List[str] = []

  i = 0
  while i < len(argv):
    arg = argv[i]
    has_value = i + 1 < len(argv)
    if arg == '--policy-dir' and has_value:
      policy_dir = argv[i+1]
      sources['policy_dir'] = SOURCE_COMMAND_LINE
      i += 1
    elif arg == '--project-dir' and has_value:
      project_dir = argv[i+1]
      sources['project_dir'] = SOURCE_COMMAND_LINE
      i += 1
    elif arg == '--stack' and has_value:
      stack = argv[i+1]
      sources['stack'] = SOURCE_COMMAND_LINE
      i += 1
    elif arg in PULUMI_COMMANDS:
      command = arg
      passthrough_args.extend(argv[i+1:])
      break
    else:
      passthrough_args.append(arg)
    i += 1

  if not policy_dir:
    local_policy_dir = os.path.join(cwd, DEFAULT_POLICY_DIRNAME)
    if os.path.isdir(local_policy_dir):
      policy_dir = local_policy_dir
    else:
      policy_dir = os.path.join(install_dir, DEFAULT_POLICY_DIRNAME)
    sources['policy_dir'] = SOURCE_DEFAULT
  if not project_dir:
    project_dir = os.path.join(install_dir, DEFAULT_PROJECT_DIRNAME)
    sources['project_dir'] = SOURCE_DEFAULT
  if not stack:
    stack = None
    sources['stack'] = SOURCE_UNSET

  return ResolvedConfig(
      policy_dir=_abspath(cwd, policy_dir),
      project_dir=_abspath(cwd, project_dir),
      stack=stack,
      command=command,
      passthrough_args=passthrough_args,
      sources=sources,
    )
