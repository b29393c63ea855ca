"""Unit tests for loading task exports from CSV."""
from datetime import date

import pytest
from pydantic import ValidationError

from schemas.validator import SchemaValidationError
from scripts.scheduling.data_loader import load_dependencies, load_task_graph, load_task_records
from tests.conftest import write_exports


class TestLoadDependencies:
    """Test dependency table loading."""

    def test_groups_by_successor(self, export_dir):
        deps = load_dependencies(export_dir)
        assert deps == {'3': ['2'], '4': ['2'], '5': ['3', '4']}

    def test_missing_file_means_no_dependencies(self, tmp_path):
        write_exports(tmp_path, dependencies_csv=None)
        assert load_dependencies(tmp_path) == {}

    def test_duplicate_rows_collapse(self, tmp_path):
        write_exports(tmp_path, dependencies_csv="predecessor_id,successor_id\n2,3\n2,3\n")
        assert load_dependencies(tmp_path) == {'3': ['2']}

    def test_missing_column(self, tmp_path):
        write_exports(tmp_path, dependencies_csv="from,to\n2,3\n")
        with pytest.raises(SchemaValidationError, match='successor_id'):
            load_dependencies(tmp_path)


class TestLoadTaskRecords:
    """Test task table loading."""

    def test_rows_are_normalized(self, export_dir):
        records = {r.id: r for r in load_task_records(export_dir)}

        assert set(records) == {'1', '2', '3', '4', '5'}
        assert records['1'].is_group
        assert records['5'].is_milestone
        assert records['2'].parent_id == '1'
        assert records['5'].parent_id is None
        assert records['2'].start_date == date(2025, 1, 6)
        assert records['4'].start_date is None
        assert records['2'].progress == 100
        assert records['4'].progress == 0
        assert records['4'].priority == 3
        assert records['2'].description == 'Initial design'
        assert records['3'].description is None
        assert records['5'].dependencies == ['3', '4']

    def test_fractional_duration_rejected(self, tmp_path):
        write_exports(tmp_path, tasks_csv="id,name,duration\na,A,2.5\nb,B,3\n", dependencies_csv=None)
        with pytest.raises(ValidationError, match='duration'):
            load_task_records(tmp_path)

    def test_whole_float_duration_accepted(self, tmp_path):
        # A blank cell turns the column into floats
        write_exports(tmp_path, tasks_csv="id,name,duration,progress\na,A,2.0,\nb,B,3,50\n",
                      dependencies_csv=None)
        records = {r.id: r for r in load_task_records(tmp_path)}
        assert records['a'].duration == 2
        assert records['a'].progress == 0
        assert records['b'].progress == 50

    def test_missing_tasks_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_task_records(tmp_path)

    def test_missing_required_column(self, tmp_path):
        write_exports(tmp_path, tasks_csv="id,duration\n1,3\n", dependencies_csv=None)
        with pytest.raises(SchemaValidationError, match='name'):
            load_task_records(tmp_path)


class TestLoadTaskGraph:
    """Test graph construction from exports."""

    def test_graph(self, export_dir):
        graph = load_task_graph(export_dir, verbose=True)
        assert len(graph) == 5
        assert graph.children_of('1') == ['2', '3', '4']
        assert graph.successors_of('2') == ['3', '4']
        assert graph.validate() == []
