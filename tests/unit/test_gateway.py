"""Unit tests for the mutation gateway."""
import pytest

from scripts.scheduling.cpm.errors import (
    CyclicDependencyError,
    NotFoundError,
    SchedulingError,
    SelfReferenceError,
)
from scripts.scheduling.cpm.gateway import (
    add_dependency,
    create_task,
    remove_dependency,
    remove_task,
    set_parent,
    update_task,
)
from scripts.scheduling.cpm.network import TaskGraph
from tests.conftest import make_task


class TestAddDependency:
    """Test dependency proposals."""

    def test_back_edge_rejected(self):
        tasks = [make_task('A', 3), make_task('B', 2, ['A'])]
        with pytest.raises(CyclicDependencyError) as exc:
            add_dependency(tasks, 'B', 'A')
        assert exc.value.source_id == 'B'
        assert exc.value.target_id == 'A'
        assert 'circular dependency' in exc.value.message
        # Nothing changed
        assert tasks[0].dependencies == frozenset()

    def test_valid_edge(self, diamond_tasks):
        updated = add_dependency(diamond_tasks, 'C', 'B')
        assert updated.task_id == 'B'
        assert updated.dependencies == {'A', 'C'}

    def test_existing_edge_is_idempotent(self, diamond_graph):
        existing = diamond_graph.get_task('B')
        assert add_dependency(diamond_graph, 'A', 'B') is existing

    def test_self_dependency(self, diamond_tasks):
        with pytest.raises(SelfReferenceError):
            add_dependency(diamond_tasks, 'A', 'A')

    def test_self_reference_is_a_cycle_error(self, diamond_tasks):
        with pytest.raises(CyclicDependencyError):
            add_dependency(diamond_tasks, 'A', 'A')

    @pytest.mark.parametrize('source,target,missing', [('ghost', 'A', 'ghost'), ('A', 'ghost', 'ghost')])
    def test_unknown_task(self, diamond_tasks, source, target, missing):
        with pytest.raises(NotFoundError) as exc:
            add_dependency(diamond_tasks, source, target)
        assert exc.value.task_id == missing

    def test_transitive_cycle_rejected(self, diamond_tasks):
        with pytest.raises(CyclicDependencyError):
            add_dependency(diamond_tasks, 'D', 'A')


class TestRemoveDependency:
    """Test dependency removal."""

    def test_remove(self, diamond_tasks):
        assert remove_dependency(diamond_tasks, 'B', 'D').dependencies == {'C'}

    def test_remove_missing_edge_is_noop(self, diamond_graph):
        task = diamond_graph.get_task('C')
        assert remove_dependency(diamond_graph, 'B', 'C') is task


class TestSetParent:
    """Test hierarchy proposals."""

    def test_self_parent(self, wbs_tasks):
        with pytest.raises(SelfReferenceError) as exc:
            set_parent(wbs_tasks, 'G1', 'G1')
        assert exc.value.kind == 'parent'
        assert 'own parent' in exc.value.message

    def test_move_under_descendant(self, wbs_tasks):
        with pytest.raises(CyclicDependencyError) as exc:
            set_parent(wbs_tasks, 'G1', 'G2')
        assert exc.value.kind == 'parent'

    def test_valid_move(self, wbs_tasks):
        moved = set_parent(wbs_tasks, 'a1', 'G2')
        assert moved.parent_id == 'G2'

    def test_move_to_top_level(self, wbs_tasks):
        assert set_parent(wbs_tasks, 'G2', None).parent_id is None

    def test_unknown_parent(self, wbs_tasks):
        with pytest.raises(NotFoundError) as exc:
            set_parent(wbs_tasks, 'a1', 'nowhere')
        assert exc.value.role == 'Parent task'

    def test_unknown_task(self, wbs_tasks):
        with pytest.raises(NotFoundError):
            set_parent(wbs_tasks, 'ghost', 'G1')


class TestTaskLifecycle:
    """Test create, update and delete proposals."""

    def test_create_task(self, wbs_tasks):
        created = create_task(wbs_tasks, make_task('b2', 2, ['b1'], parent_id='G2'))
        assert created.dependencies == {'b1'}
        assert created.parent_id == 'G2'

    def test_create_duplicate(self, wbs_tasks):
        with pytest.raises(ValueError, match='already exists'):
            create_task(wbs_tasks, make_task('a1'))

    def test_create_with_missing_dependency(self, wbs_tasks):
        with pytest.raises(NotFoundError):
            create_task(wbs_tasks, make_task('x', 1, ['ghost']))

    def test_update_rejects_new_cycle(self, diamond_tasks):
        with pytest.raises(CyclicDependencyError):
            update_task(diamond_tasks, make_task('A', 2, ['D']))

    def test_update_keeps_existing_and_adds_new(self, diamond_tasks):
        updated = update_task(diamond_tasks, make_task('C', 6, ['A', 'B']))
        assert updated.duration == 6
        assert updated.dependencies == {'A', 'B'}

    def test_update_can_drop_edges(self, diamond_tasks):
        assert update_task(diamond_tasks, make_task('D', 3, ['C'])).dependencies == {'C'}

    def test_update_unknown(self, diamond_tasks):
        with pytest.raises(NotFoundError):
            update_task(diamond_tasks, make_task('Z'))

    def test_remove_task_cascade(self, wbs_tasks):
        changed = remove_task(wbs_tasks, 'G1')
        assert [t.task_id for t in changed] == ['G2', 'a1', 'a2', 'm1']
        assert all(t.parent_id is None for t in changed)

    def test_remove_task_drops_edges(self, diamond_tasks):
        changed = remove_task(diamond_tasks, 'A')
        assert {t.task_id: t.dependencies for t in changed} == {'B': frozenset(), 'C': frozenset()}

    def test_errors_share_base_class(self, diamond_tasks):
        with pytest.raises(SchedulingError):
            remove_task(TaskGraph(diamond_tasks), 'ghost')
