from archetype_json.codec.config import CodecConfig


class TestCodecConfig:
    """Test cases for the codec configuration"""

    def test_defaults(self):
        config = CodecConfig()
        assert config.name_key == "kind"
        assert config.children_key == "children"
        assert config.object_keys == ["methods", "expressions"]
        assert config.condition_key == "if"
        assert config.strict_root is True

    def test_dict_round_trip(self):
        config = CodecConfig(indent=4, expression_id_prefix="expr", validate_expressions=False)
        assert CodecConfig.from_dict(config.to_dict()) == config

    def test_from_dict_ignores_unknown_keys(self):
        config = CodecConfig.from_dict({"indent": 8, "unknown": True})
        assert config.indent == 8
        assert not hasattr(config, "unknown")

    def test_object_keys_are_copied(self):
        keys = ["methods"]
        config = CodecConfig.from_dict({"object_keys": keys})
        keys.append("other")
        assert config.object_keys == ["methods"]
