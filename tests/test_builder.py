import pytest

from square_commerce.builder import RequestBuilder, check_constraints, new_idempotency_key
from square_commerce.exceptions import BuilderConsumedError, ConflictError, ValidationError
from square_commerce.models.bookings import AppointmentSegment
from square_commerce.services.bookings import AppointmentSegmentBuilder


class TestCheckConstraints:
    """Unit tests for the shared constraint-table validator"""

    def test_all_required_present(self):
        """Test that a complete set of values passes"""
        check_constraints("X", {"a": 1, "b": "two"}, required=("a", "b"))

    def test_missing_fields_listed_in_declaration_order(self):
        """Test that every missing field is named, and only those"""
        with pytest.raises(ValidationError) as exc_info:
            check_constraints("X", {"b": 1}, required=("a", "b", "c"))
        assert exc_info.value.fields == ["a", "c"]
        assert "a, c" in str(exc_info.value)

    def test_empty_list_counts_as_missing(self):
        """Test that a required list field must be non-empty"""
        with pytest.raises(ValidationError) as exc_info:
            check_constraints("X", {"items": []}, required=("items",))
        assert exc_info.value.fields == ["items"]

    def test_false_counts_as_set(self):
        """Test that falsy scalars other than None satisfy required"""
        check_constraints("X", {"flag": False, "count": 0}, required=("flag", "count"))

    def test_conflict_checked_before_missing(self):
        """Test that an exclusive-group conflict wins over missing fields"""
        with pytest.raises(ConflictError) as exc_info:
            check_constraints("X", {"a": 1, "b": 2}, required=("c",), exclusive=(("a", "b"),))
        assert exc_info.value.fields == ["a", "b"]

    def test_conflict_is_validation_error(self):
        """Test that ConflictError can be caught as ValidationError"""
        with pytest.raises(ValidationError):
            check_constraints("X", {"a": 1, "b": 2}, exclusive=(("a", "b"),))

    def test_one_of_requires_any_member(self):
        """Test one_of groups"""
        check_constraints("X", {"b": 1}, one_of=(("a", "b"),))
        with pytest.raises(ValidationError) as exc_info:
            check_constraints("X", {}, one_of=(("a", "b"),))
        assert exc_info.value.fields == ["a", "b"]


class TestAppointmentSegmentBuilder:
    """Unit tests for builder lifecycle using the appointment segment builder"""

    @pytest.fixture
    def segment_builder(self):
        """Builder with every required field set"""
        return (AppointmentSegmentBuilder()
                .duration_minutes(60.0)
                .service_variation_id("sv_1")
                .service_variation_version(1655427266071))

    def test_finalize_returns_frozen_model(self, segment_builder):
        """Test that finalize produces an immutable request value"""
        segment = segment_builder.team_member_id("tm_1").finalize()
        assert isinstance(segment, AppointmentSegment)
        assert segment.team_member_id == "tm_1"
        with pytest.raises(Exception):
            segment.team_member_id = "tm_2"

    def test_unset_optionals_are_not_serialized(self, segment_builder):
        """Test that only set fields appear in the serialized form"""
        segment = segment_builder.any_team_member_id().finalize()
        assert segment.model_dump(mode="json", exclude_unset=True) == {
            "duration_minutes": 60.0,
            "service_variation_id": "sv_1",
            "service_variation_version": 1655427266071,
            "any_team_member_id": True,
        }

    def test_team_member_conflict(self, segment_builder):
        """Test that both team member selectors cannot be set together"""
        segment_builder.team_member_id("tm_1").any_team_member_id(True)
        with pytest.raises(ConflictError) as exc_info:
            segment_builder.finalize()
        assert set(exc_info.value.fields) == {"team_member_id", "any_team_member_id"}

    def test_missing_required_fields(self):
        """Test that missing required fields are named exactly"""
        builder = AppointmentSegmentBuilder().service_variation_id("sv_1")
        with pytest.raises(ValidationError) as exc_info:
            builder.finalize()
        assert exc_info.value.fields == ["duration_minutes", "service_variation_version"]

    def test_failed_finalize_does_not_consume(self):
        """Test that a builder can be completed and retried after a validation failure"""
        builder = AppointmentSegmentBuilder().duration_minutes(30)
        with pytest.raises(ValidationError):
            builder.finalize()
        assert not builder.consumed

        builder.service_variation_id("sv_1").service_variation_version(1)
        assert builder.finalize().duration_minutes == 30

    def test_reuse_raises(self, segment_builder):
        """Test that a builder is single-use"""
        segment_builder.finalize()
        assert segment_builder.consumed
        with pytest.raises(BuilderConsumedError):
            segment_builder.finalize()

    def test_setting_none_unsets(self, segment_builder):
        """Test that passing None clears a previously set field"""
        segment_builder.team_member_id("tm_1").team_member_id(None).any_team_member_id()
        segment = segment_builder.finalize()
        assert "team_member_id" not in segment.model_fields_set

    def test_resource_ids_accumulate(self, segment_builder):
        """Test that list setters append"""
        segment = segment_builder.add_resource_id("r1").add_resource_id("r2").finalize()
        assert segment.resource_ids == ("r1", "r2")

    def test_invalid_value_becomes_validation_error(self):
        """Test that type errors surface as our ValidationError"""
        builder = (AppointmentSegmentBuilder()
                   .duration_minutes("an hour")
                   .service_variation_id("sv_1")
                   .service_variation_version(1))
        with pytest.raises(ValidationError) as exc_info:
            builder.finalize()
        assert exc_info.value.fields == ["duration_minutes"]
        assert not builder.consumed

    @pytest.mark.asyncio
    async def test_unbound_build_returns_request(self, segment_builder):
        """Test that build() without a dispatch target returns the request"""
        segment = await segment_builder.build()
        assert isinstance(segment, AppointmentSegment)


class TestBoundBuilder:
    """Tests for builders bound to a dispatch coroutine"""

    class _EchoBuilder(RequestBuilder):
        request_model = AppointmentSegment
        required = ("service_variation_id",)

        def service_variation_id(self, value):
            return self._set("service_variation_id", value)

    @pytest.mark.asyncio
    async def test_build_dispatches_once(self):
        """Test that build() sends the finalized request exactly once"""
        sent = []

        async def dispatch(request):
            sent.append(request)
            return "response"

        builder = self._EchoBuilder(dispatch=dispatch).service_variation_id("sv_1")
        assert await builder.build() == "response"
        assert len(sent) == 1
        assert sent[0].service_variation_id == "sv_1"

    @pytest.mark.asyncio
    async def test_invalid_build_never_dispatches(self):
        """Test that validation failures happen before dispatch"""
        sent = []

        async def dispatch(request):
            sent.append(request)

        with pytest.raises(ValidationError):
            await self._EchoBuilder(dispatch=dispatch).build()
        assert sent == []


def test_idempotency_keys_are_unique():
    """Test that generated idempotency keys do not repeat"""
    keys = {new_idempotency_key() for _ in range(100)}
    assert len(keys) == 100
