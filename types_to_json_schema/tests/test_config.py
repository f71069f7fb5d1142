import pytest

from types_to_json_schema.config import GeneratorConfig


class TestGeneratorConfig:
    """Test configuration loading"""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.ref is True
        assert config.required is False
        assert config.validation_keywords == []
        assert config.id == ""

    def test_from_dict_camel_case(self):
        config = GeneratorConfig.from_dict(
            {
                "aliasRef": True,
                "noExtraProps": True,
                "validationKeywords": ["examples"],
                "rejectDateType": True,
                "id": "urn:schemas",
            }
        )
        assert config.alias_ref is True
        assert config.no_extra_props is True
        assert config.validation_keywords == ["examples"]
        assert config.reject_date_type is True
        assert config.id == "urn:schemas"

    def test_from_dict_snake_case(self):
        config = GeneratorConfig.from_dict({"top_ref": True, "unique_names": True, "ref": False})
        assert config.top_ref is True
        assert config.unique_names is True
        assert config.ref is False

    def test_unknown_keys_are_ignored(self):
        config = GeneratorConfig.from_dict({"compilerOptions": {"strict": True}, "required": True})
        assert config.required is True
        assert not hasattr(config, "compilerOptions")

    def test_round_trip(self):
        config = GeneratorConfig(titles=True, include=["src/*.ts"], out="schema.json")
        data = config.to_dict()

        assert data["titles"] is True
        assert data["include"] == ["src/*.ts"]
        assert GeneratorConfig.from_dict(data) == config

    def test_validation_keywords_are_not_shared(self):
        first = GeneratorConfig()
        first.validation_keywords.append("examples")
        assert GeneratorConfig().validation_keywords == []


if __name__ == "__main__":
    pytest.main([__file__])
