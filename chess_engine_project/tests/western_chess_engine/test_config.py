"""
测试配置管理

测试默认配置文件生成、加载、更新、重置、验证和导出。
"""

import json

import pytest
import yaml

from chess_engine_project.src.western_chess_engine.config import (
    AIConfig, ConfigManager, EvaluationConfig, GameConfig, SearchConfig
)
from chess_engine_project.src.western_chess_engine.utils.exceptions import ConfigurationError


class TestConfigManager:
    """ConfigManager类的测试"""

    @pytest.fixture
    def manager(self, tmp_path):
        return ConfigManager(str(tmp_path / "configs"))

    def test_default_files_created(self, manager):
        """测试默认配置文件被创建"""
        for config_file in manager.config_files.values():
            assert config_file.exists()

    def test_load_defaults(self, manager):
        """测试加载默认配置"""
        assert manager.get_search_config() == SearchConfig()
        assert manager.get_ai_config() == AIConfig()
        assert manager.get_game_config() == GameConfig()

        evaluation = manager.get_evaluation_config()
        assert evaluation == EvaluationConfig()
        assert evaluation.material_values['queen'] == 900
        assert len(evaluation.piece_square_tables['king']) == 8

    def test_update_config(self, manager):
        """测试更新配置并持久化"""
        manager.update_config('ai', difficulty_level=3, time_limit=1.5, unknown_field=1)
        ai_config = manager.get_ai_config()
        assert ai_config.difficulty_level == 3
        assert ai_config.time_limit == 1.5
        assert not hasattr(ai_config, 'unknown_field')

        # 新的管理器从同一目录读取
        other = ConfigManager(str(manager.config_dir))
        assert other.get_ai_config().difficulty_level == 3

    def test_reset_config(self, manager):
        """测试重置配置"""
        manager.update_config('search', default_depth=4)
        manager.reset_config('search')
        assert manager.get_search_config().default_depth == SearchConfig().default_depth

    def test_unknown_config_name(self, manager):
        """测试未知配置名称"""
        with pytest.raises(ConfigurationError):
            manager.load_config('unknown', AIConfig)
        with pytest.raises(ConfigurationError):
            manager.update_config('unknown', value=1)
        with pytest.raises(ConfigurationError):
            manager.validate_config('unknown')

    def test_corrupted_file_falls_back_to_default(self, manager):
        """测试损坏的配置文件回退到默认配置"""
        manager.config_files['ai'].write_text("difficulty_level: [1, 2", encoding='utf-8')
        assert manager.get_ai_config() == AIConfig()

        manager.config_files['game'].write_text("- 1\n- 2\n", encoding='utf-8')
        assert manager.get_game_config() == GameConfig()

    def test_missing_file_falls_back_to_default(self, manager):
        """测试缺失的配置文件回退到默认配置"""
        manager.config_files['search'].unlink()
        assert manager.get_search_config() == SearchConfig()

    def test_unknown_fields_ignored(self, manager):
        """测试配置文件中的未知字段被忽略"""
        manager.config_files['search'].write_text(
            "default_depth: 3\nlegacy_option: true\n", encoding='utf-8'
        )
        search_config = manager.get_search_config()
        assert search_config.default_depth == 3
        assert search_config.max_depth == SearchConfig().max_depth

    def test_defaults_not_shared(self, manager):
        """测试返回的默认配置是副本"""
        manager.config_files['ai'].unlink()
        first = manager.get_ai_config()
        first.difficulty_level = 1
        assert manager.get_ai_config().difficulty_level == AIConfig().difficulty_level

    def test_validate_config(self, manager):
        """测试配置验证"""
        for name in manager.config_types:
            assert manager.validate_config(name), name

        manager.update_config('search', default_depth=10)
        assert not manager.validate_config('search')

        manager.update_config('ai', difficulty_level=7)
        assert not manager.validate_config('ai')

        manager.update_config('game', repetition_limit=1)
        assert not manager.validate_config('game')

        manager.update_config('evaluation', hanging_divisor=0)
        assert not manager.validate_config('evaluation')

    def test_get_all_configs(self, manager):
        """测试获取所有配置"""
        configs = manager.get_all_configs()
        assert set(configs) == {'evaluation', 'search', 'ai', 'game', 'system'}
        assert isinstance(configs['search'], SearchConfig)

    def test_export_configs(self, manager, tmp_path):
        """测试导出配置"""
        yaml_path = tmp_path / "export.yaml"
        manager.export_configs(str(yaml_path))
        with open(yaml_path, 'r', encoding='utf-8') as f:
            exported = yaml.safe_load(f)
        assert set(exported) == {'evaluation', 'search', 'ai', 'game', 'system'}
        assert exported['search']['default_depth'] == 2

        json_path = tmp_path / "export.json"
        manager.export_configs(str(json_path))
        with open(json_path, 'r', encoding='utf-8') as f:
            exported = json.load(f)
        assert exported['evaluation']['material_values']['rook'] == 500


if __name__ == "__main__":
    pytest.main([__file__])
