import pytest
from django.core.exceptions import ImproperlyConfigured

from django_dense_vector.exceptions import ConfigurationError
from django_dense_vector.validators import MAX_DIMS_COUNT, validate_dims, validate_meta


class TestValidateDims:
    @pytest.mark.parametrize("dims", [1, 3, 768, MAX_DIMS_COUNT])
    def test_accepts_dims_in_range(self, dims):
        assert validate_dims(dims, field_name="vector") == dims

    def test_missing_dims(self):
        with pytest.raises(ConfigurationError) as excinfo:
            validate_dims(None, field_name="vector")

        assert str(excinfo.value) == (
            "Missing required parameter [dims] for field [vector]"
        )

    @pytest.mark.parametrize("dims", [0, -1, MAX_DIMS_COUNT + 1, 100000])
    def test_rejects_dims_out_of_range(self, dims):
        with pytest.raises(ConfigurationError) as excinfo:
            validate_dims(dims, field_name="vector")

        assert "should be in the range [1, 2048]" in str(excinfo.value)
        assert f"but was [{dims}]" in str(excinfo.value)
        assert "[vector]" in str(excinfo.value)

    @pytest.mark.parametrize("dims", ["abc", 2.5, True, [3]])
    def test_rejects_non_integers(self, dims):
        with pytest.raises(ConfigurationError, match="must be an integer"):
            validate_dims(dims, field_name="vector")

    def test_coerces_integral_values(self):
        assert validate_dims("16", field_name="vector") == 16
        assert validate_dims(16.0, field_name="vector") == 16

    def test_configuration_error_is_improperly_configured(self):
        with pytest.raises(ImproperlyConfigured):
            validate_dims(0, field_name="vector")


class TestValidateMeta:
    def test_none_is_empty(self):
        assert validate_meta(None, field_name="vector") == {}

    def test_accepts_string_values(self):
        meta = {"unit": "cosine", "model": "mxbai-embed-large"}
        assert validate_meta(meta, field_name="vector") == meta

    def test_too_many_entries(self):
        meta = {f"key{i}": "value" for i in range(6)}
        with pytest.raises(ConfigurationError, match="more than 5 entries"):
            validate_meta(meta, field_name="vector")

    def test_long_key(self):
        with pytest.raises(ConfigurationError, match="keys"):
            validate_meta({"k" * 21: "value"}, field_name="vector")

    def test_non_string_value(self):
        with pytest.raises(ConfigurationError, match="can only be strings"):
            validate_meta({"size": 3}, field_name="vector")

    def test_long_value(self):
        with pytest.raises(ConfigurationError, match="longer than 50"):
            validate_meta({"note": "v" * 51}, field_name="vector")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            validate_meta(["unit"], field_name="vector")
