"""Unit tests for CPM data models."""
import pytest

from scripts.scheduling.cpm.models import (
    CPMResult,
    InsufficientData,
    ScheduledTask,
    ScheduleEdge,
    Task,
)
from tests.conftest import make_task


class TestTask:
    """Test Task invariants and copy helpers."""

    def test_dependencies_are_frozen(self):
        task = Task(task_id='a', name='A', duration=1, dependencies=['x', 'y', 'x'])
        assert task.dependencies == frozenset({'x', 'y'})

    def test_group_and_milestone_are_exclusive(self):
        with pytest.raises(ValueError, match='both a group and a milestone'):
            Task(task_id='a', name='A', is_group=True, is_milestone=True)

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Task(task_id='a', name='A', duration=-1)

    @pytest.mark.parametrize('field,value', [('progress', 101), ('progress', -1),
                                             ('priority', 0), ('priority', 6)])
    def test_out_of_range_display_fields(self, field, value):
        with pytest.raises(ValueError):
            Task(task_id='a', name='A', **{field: value})

    def test_self_dependency_rejected(self):
        with pytest.raises(ValueError, match='cannot depend on itself'):
            Task(task_id='a', name='A', dependencies={'a'})

    def test_schedulable(self):
        assert make_task('a').is_schedulable()
        assert not make_task('g', 0, is_group=True).is_schedulable()
        assert not make_task('m', 0, is_milestone=True).is_schedulable()

    @pytest.mark.parametrize('progress,state', [(0, 'todo'), (1, 'in_progress'),
                                                (99, 'in_progress'), (100, 'done')])
    def test_progress_state(self, progress, state):
        assert make_task('a', progress=progress).progress_state() == state

    def test_with_dependency_is_idempotent(self):
        task = make_task('b', deps=['a'])
        assert task.with_dependency('a') is task
        assert task.with_dependency('c').dependencies == {'a', 'c'}
        # Original unchanged
        assert task.dependencies == {'a'}

    def test_without_dependency_and_parent(self):
        task = make_task('b', deps=['a'], parent_id='g')
        assert task.without_dependency('a').dependencies == frozenset()
        assert task.with_parent(None).parent_id is None
        assert task.with_parent('g') is task


class TestResults:
    """Test scheduled task and result helpers."""

    def test_scheduled_task_float(self):
        st = ScheduledTask(make_task('a', 2), early_start=1, early_finish=3,
                           late_start=4, late_finish=6)
        assert st.total_float == 3
        assert not st.is_critical

    def test_insufficient_data_is_falsy(self):
        signal = InsufficientData(reason='nothing to do')
        assert not signal

    def test_result_lookup_and_ordering(self):
        a = ScheduledTask(make_task('a', 2), 0, 2, 0, 2)
        b = ScheduledTask(make_task('b', 1), 2, 3, 4, 5)
        c = ScheduledTask(make_task('c', 3), 2, 5, 2, 5)
        result = CPMResult(
            critical_tasks=[a, c],
            non_critical_tasks=[b],
            edges=[ScheduleEdge('a', 'b'), ScheduleEdge('a', 'c', is_critical=True)],
            project_duration=5,
            start_nodes=['a'],
        )
        assert result.critical_path == ['a', 'c']
        assert [st.task_id for st in result.all_tasks()] == ['a', 'b', 'c']
        assert result.get_task('b') is b
        assert result.get_task('zzz') is None
        assert result.get_critical_edges() == [ScheduleEdge('a', 'c', is_critical=True)]
        assert [st.task_id for st in result.get_tasks_by_float(max_float=0)] == ['a', 'c']
