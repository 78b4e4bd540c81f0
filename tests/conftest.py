from typing import List, Optional, Tuple

import pytest

class FakeSpawner:
  calls: List[Tuple[str, List[str], str]]
  exit_code: int
  exc: Optional[Exception]

  def __init__(self, exit_code: int=0, exc: Optional[Exception]=None):
    self.calls = []
    self.exit_code = exit_code
    self.exc = exc

  def __call__(self, binary: str, args: List[str], cwd: str) -> int:
    self.calls.append((binary, list(args), cwd))
    if not self.exc is None:
      raise self.exc
    return self.exit_code

@pytest.fixture
def spawner() -> FakeSpawner:
  return FakeSpawner()

@pytest.fixture
def make_spawner():
  return FakeSpawner

@pytest.fixture
def dirs(tmp_path):
  """A working directory with an existing policy pack and project."""
  policy_dir = tmp_path / 'policies'
  project_dir = tmp_path / 'project'
  install_dir = tmp_path / 'install'
  policy_dir.mkdir()
  project_dir.mkdir()
  install_dir.mkdir()
  return dict(
      cwd=str(tmp_path),
      policy_dir=str(policy_dir),
      project_dir=str(project_dir),
      install_dir=str(install_dir),
    )
