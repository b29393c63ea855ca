"""Unit tests for critical path reporting and what-if analysis."""
import pandas as pd

from scripts.scheduling.analysis.critical_path import (
    EDGE_COLUMNS,
    TASK_COLUMNS,
    analyze_critical_path,
    edge_table,
    float_bucket,
    print_critical_path_report,
    schedule_table,
    summarize_critical_path,
    write_critical_path_tables,
)
from scripts.scheduling.analysis.task_impact import analyze_task_impact, analyze_task_sensitivity
from scripts.scheduling.cpm.engine import calculate_critical_path
from scripts.scheduling.cpm.models import InsufficientData
from tests.conftest import make_task


class TestAnalyzeCriticalPath:
    """Test the critical path summary."""

    def test_summary(self, diamond_tasks):
        summary = analyze_critical_path(diamond_tasks, near_critical_threshold_days=5)

        assert summary.project_duration == 10
        assert [st.task_id for st in summary.critical_path] == ['A', 'B', 'D']
        assert [st.task_id for st in summary.near_critical_tasks] == ['C']
        assert summary.float_distribution == {'0 (critical)': 3, '3-5 days': 1}
        assert summary.total_tasks == 4
        assert summary.get_critical_path_length() == 3

    def test_summary_from_existing_result(self, diamond_tasks):
        result = calculate_critical_path(diamond_tasks)
        summary = summarize_critical_path(result, near_critical_threshold_days=4)
        assert summary.project_duration == result.project_duration
        assert [st.task_id for st in summary.near_critical_tasks] == ['C']

    def test_threshold_excludes_high_float(self, diamond_tasks):
        summary = analyze_critical_path(diamond_tasks, near_critical_threshold_days=3)
        assert summary.near_critical_tasks == []

    def test_insufficient_data_passes_through(self):
        assert isinstance(analyze_critical_path([make_task('a')]), InsufficientData)

    def test_float_buckets(self):
        assert float_bucket(0) == '0 (critical)'
        assert float_bucket(2) == '1-2 days'
        assert float_bucket(10) == '6-10 days'
        assert float_bucket(21) == '> 20 days'

    def test_report_prints(self, diamond_tasks, capsys):
        print_critical_path_report(analyze_critical_path(diamond_tasks))
        out = capsys.readouterr().out
        assert 'Project Duration: 10 days' in out
        assert 'Critical Tasks: 3' in out


class TestTables:
    """Test DataFrame outputs."""

    def test_schedule_table(self, diamond_tasks):
        df = schedule_table(calculate_critical_path(diamond_tasks))
        assert list(df.columns) == TASK_COLUMNS
        assert list(df['task_id']) == ['A', 'B', 'C', 'D']
        assert list(df['total_float']) == [0, 0, 4, 0]
        assert list(df['is_critical']) == [True, True, False, True]

    def test_edge_table(self, diamond_tasks):
        df = edge_table(calculate_critical_path(diamond_tasks))
        assert list(df.columns) == EDGE_COLUMNS
        assert df['is_critical'].sum() == 2

    def test_empty_tables_for_insufficient_data(self):
        signal = InsufficientData(reason='empty')
        assert schedule_table(signal).empty
        assert list(edge_table(signal).columns) == EDGE_COLUMNS

    def test_write_tables(self, diamond_tasks, tmp_path):
        task_path, edge_path = write_critical_path_tables(
            calculate_critical_path(diamond_tasks), tmp_path / 'out'
        )
        written = pd.read_csv(task_path)
        assert list(written['task_id']) == ['A', 'B', 'C', 'D']
        assert len(pd.read_csv(edge_path)) == 4


class TestTaskImpact:
    """Test single task what-if analysis."""

    def test_critical_task_slip(self, diamond_tasks):
        impact = analyze_task_impact(diamond_tasks, 'B', 2)
        assert impact.original_duration == 10
        assert impact.new_duration == 12
        assert impact.slip_days == 2
        assert impact.affected_task_ids == ['B', 'D']
        assert not impact.critical_path_changed
        assert impact.get_slip_summary() == '2 days slip'

    def test_float_absorbs_delay(self, diamond_tasks):
        impact = analyze_task_impact(diamond_tasks, 'C', 3)
        assert impact.slip_days == 0
        assert impact.affected_task_ids == ['C']
        assert impact.get_slip_summary() == 'No impact on project finish'

    def test_critical_path_shift(self, diamond_tasks):
        impact = analyze_task_impact(diamond_tasks, 'C', 5)
        assert impact.slip_days == 1
        assert impact.critical_path_changed
        assert impact.new_critical_path == ['A', 'C', 'D']

    def test_duration_clamped_at_zero(self, diamond_tasks):
        impact = analyze_task_impact(diamond_tasks, 'B', -50)
        # B drops to zero days, so C now drives D
        assert impact.new_duration == 6
        assert impact.slip_days == -4

    def test_unconnected_tasks(self):
        impact = analyze_task_impact([make_task('a', 2), make_task('b', 3)], 'a', 4)
        assert impact.original_duration == 3
        assert impact.slip_days == 3

    def test_sensitivity_ranking(self, diamond_tasks):
        results = analyze_task_sensitivity(diamond_tasks, duration_delta=5)
        assert [(r.task_id, r.slip_days) for r in results] == [
            ('A', 5), ('B', 5), ('D', 5), ('C', 1),
        ]
