"""Pytest configuration and fixtures."""
import pytest
from typing import List

from scripts.scheduling.cpm.models import Task
from scripts.scheduling.cpm.network import TaskGraph


def make_task(task_id: str, duration: int = 1, deps=(), **kwargs) -> Task:
    """Build a Task with a default name."""
    return Task(
        task_id=task_id,
        name=kwargs.pop('name', f'Task {task_id}'),
        duration=duration,
        dependencies=frozenset(deps),
        **kwargs,
    )


@pytest.fixture
def task_factory():
    """Factory for Task objects."""
    return make_task


@pytest.fixture
def branching_tasks() -> List[Task]:
    """A(3) feeding B(2) and C(4)."""
    return [
        make_task('A', 3),
        make_task('B', 2, ['A']),
        make_task('C', 4, ['A']),
    ]


@pytest.fixture
def diamond_tasks() -> List[Task]:
    """A(2) -> B(5), C(1) -> D(3): the long branch runs through B."""
    return [
        make_task('A', 2),
        make_task('B', 5, ['A']),
        make_task('C', 1, ['A']),
        make_task('D', 3, ['B', 'C']),
    ]


@pytest.fixture
def wbs_tasks() -> List[Task]:
    """
    Grouped project:

        G1 (group)
          a1, a2 -> a1
          G2 (group)
            b1
        top (no parent), m1 (milestone under G1)
    """
    return [
        make_task('G1', 0, is_group=True),
        make_task('G2', 0, parent_id='G1', is_group=True),
        make_task('a1', 2, parent_id='G1'),
        make_task('a2', 3, ['a1'], parent_id='G1'),
        make_task('b1', 4, ['a2'], parent_id='G2'),
        make_task('m1', 0, ['b1'], parent_id='G1', is_milestone=True),
        make_task('top', 1),
    ]


@pytest.fixture
def diamond_graph(diamond_tasks) -> TaskGraph:
    return TaskGraph(diamond_tasks)


@pytest.fixture
def sample_records() -> List[dict]:
    """Raw task rows as the persistence layer delivers them."""
    return [
        {'id': 't1', 'name': 'Design', 'startDate': '2025-01-06', 'duration': 3,
         'progress': 100, 'dependencies': [], 'isGroup': False, 'isMilestone': False,
         'priority': 2},
        {'id': 't2', 'name': 'Build', 'startDate': '2025-01-09', 'duration': 5,
         'progress': 40, 'dependencies': ['t1'], 'parentId': None, 'priority': 3},
        {'id': 't3', 'name': 'Launch', 'duration': 0, 'dependencies': ['t2'],
         'isMilestone': True},
    ]


TASKS_CSV = """\
id,name,start_date,duration,progress,parent_id,is_group,is_milestone,priority,description
1,Phase 1,,0,,,True,False,,
2,Design,2025-01-06,3,100,1,False,False,2,Initial design
3,Build,2025-01-09,5,40,1,False,False,3,
4,Test,,2,,1,False,False,,
5,Launch,,0,,,False,True,1,
"""

DEPENDENCIES_CSV = """\
predecessor_id,successor_id
2,3
2,4
3,5
4,5
"""


def write_exports(data_dir, tasks_csv=TASKS_CSV, dependencies_csv=DEPENDENCIES_CSV):
    """Write tasks.csv (and task_dependencies.csv unless None) into data_dir."""
    (data_dir / 'tasks.csv').write_text(tasks_csv)
    if dependencies_csv is not None:
        (data_dir / 'task_dependencies.csv').write_text(dependencies_csv)
    return data_dir


@pytest.fixture
def export_dir(tmp_path):
    """
    Directory with a small CSV export:

        1 Phase 1 (group): 2 Design(3) -> 3 Build(5), 4 Test(2)
        5 Launch (milestone) after 3 and 4
    """
    return write_exports(tmp_path)
