"""
Unit tests for transformation chaining.
"""

from unittest.mock import Mock

from conftest import new_record
from transforms import AdmissionFilter, FieldRouter, Headers, Transformation, TransformationChain


class TestTransformationChain:
    """Test applying transformations in sequence."""

    def setup_method(self):
        """Set up test fixtures."""
        self.chain = TransformationChain([
            AdmissionFilter({"headerKey": "skip"}),
            FieldRouter({"sourceKey": "kubernetes.namespace", "destKey": "index", "toMetadata": True}),
            FieldRouter({"sourceKey": "level", "regexPattern": "(?i)warn(ing)?", "regexFormat": "WARN"}),
        ])

    def test_all_transformations_applied(self):
        """Test that each transformation sees the previous result."""
        record = new_record({"kubernetes": {"namespace": "logging"}, "level": "warning"})

        result = self.chain.apply(record)

        assert result.value == {"kubernetes": {}, "level": "WARN"}
        assert result.headers.last_with_name("index").value == "logging"

    def test_dropped_record_stops_chain(self):
        """Test that later transformations never see a dropped record."""
        later = Mock(spec=Transformation)
        self.chain.add(later)

        result = self.chain.apply(new_record({"level": "warning"}, Headers().add("skip", "1")))

        assert result is None
        later.apply.assert_not_called()

    def test_unchanged_record_passes_same_reference(self):
        """Test that nothing is copied when no transformation applies."""
        record = new_record({"message": "hello"})

        assert self.chain.apply(record) is record

    def test_apply_all_leaves_out_dropped(self):
        """Test batch application."""
        records = [
            new_record({"level": "warn"}),
            new_record({"level": "info"}, Headers().add("skip", "1")),
            new_record({"level": "info"}),
        ]

        results = self.chain.apply_all(records)

        assert [r.value["level"] for r in results] == ["WARN", "info"]

    def test_empty_chain_is_identity(self):
        """Test that an empty chain returns its input."""
        record = new_record({"a": 1})

        assert TransformationChain().apply(record) is record

    def test_add_and_len(self):
        """Test appending transformations."""
        chain = TransformationChain()
        returned = chain.add(AdmissionFilter({"headerKey": "x"}))

        assert returned is chain
        assert len(chain) == 1
        assert len(self.chain) == 3

    def test_close_closes_all(self):
        """Test that close() reaches every transformation."""
        first, second = Mock(spec=Transformation), Mock(spec=Transformation)
        chain = TransformationChain([first, second])

        chain.close()

        first.close.assert_called_once()
        second.close.assert_called_once()

    def test_span_records_steps_and_outcome(self, span_exporter):
        """Test that each transformation adds a step to the record span."""
        record = new_record({"kubernetes": {"namespace": "logging"}, "level": "info"})

        self.chain.apply(record)

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "transform_record"
        assert span.attributes["record.topic"] == "topic"
        assert span.attributes["record.partition"] == 1
        assert span.attributes["record.transformation_count"] == 3
        assert span.attributes["record.outcome"] == "modified"
        steps = [(e.attributes["transformation"], e.attributes["outcome"]) for e in span.events]
        assert steps == [
            ("AdmissionFilter", "unchanged"),
            ("FieldRouter", "modified"),
            ("FieldRouter", "unchanged"),
        ]

    def test_span_marks_dropping_transformation(self, span_exporter):
        """Test that a dropped record names the transformation that dropped it."""
        self.chain.apply(new_record({"level": "warn"}, Headers().add("skip", "1")))

        (span,) = span_exporter.get_finished_spans()
        assert span.attributes["record.outcome"] == "dropped"
        assert span.attributes["record.dropped_by"] == "AdmissionFilter"
        assert len(span.events) == 1

    def test_span_outcome_unchanged(self, span_exporter):
        """Test the outcome of a record no transformation touches."""
        self.chain.apply(new_record({"message": "hello"}))

        (span,) = span_exporter.get_finished_spans()
        assert span.attributes["record.outcome"] == "unchanged"
