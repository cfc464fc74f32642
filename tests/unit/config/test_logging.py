"""Tests for logging bootstrap."""

import io
import logging
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from jira_cloud_client.config import logging as log_config

MODULE = 'jira_cloud_client.config.logging'


class TestBootstrapLogging(unittest.TestCase):

    def setUp(self):
        root = logging.getLogger()
        self._root_level = root.level
        self._package_level = logging.getLogger('jira_cloud_client').level
        self._handler_levels = [(handler, handler.level) for handler in root.handlers]
        env_patcher = patch.dict(os.environ, {}, clear=False)
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def tearDown(self):
        logging.getLogger().setLevel(self._root_level)
        logging.getLogger('jira_cloud_client').setLevel(self._package_level)
        for handler, level in self._handler_levels:
            handler.setLevel(level)

    def test_invalid_level_falls_back_to_info(self):
        os.environ['LOG_LEVEL'] = 'chatty'
        with patch('sys.stderr', new_callable=io.StringIO) as stderr:
            self.assertEqual(log_config._resolve_log_level(), 'INFO')
        self.assertIn("Invalid LOG_LEVEL 'CHATTY'", stderr.getvalue())
        self.assertEqual(os.environ['LOG_LEVEL'], 'INFO')

    def test_level_is_normalised(self):
        os.environ['LOG_LEVEL'] = ' debug '
        self.assertEqual(log_config._resolve_log_level(), 'DEBUG')

    def test_basic_config_without_ini(self):
        os.environ['LOG_LEVEL'] = 'WARNING'
        with patch(f'{MODULE}._find_logging_config', return_value=None), \
                patch(f'{MODULE}.logging.basicConfig') as basic_config:
            log_config.bootstrap_logging(force=True)

        self.assertEqual(basic_config.call_args.kwargs['level'], logging.WARNING)

    def test_ini_loaded_with_level_override(self):
        os.environ['LOG_LEVEL'] = 'ERROR'
        with patch(f'{MODULE}._find_logging_config', return_value=Path('logging.ini')), \
                patch(f'{MODULE}.logging.config.fileConfig') as file_config:
            log_config.bootstrap_logging(force=True)

        self.assertEqual(file_config.call_args.kwargs['defaults'], {'LOG_LEVEL': 'ERROR'})
        self.assertFalse(file_config.call_args.kwargs['disable_existing_loggers'])
        self.assertEqual(logging.getLogger().level, logging.ERROR)
        self.assertEqual(logging.getLogger('jira_cloud_client').level, logging.ERROR)

    def test_broken_ini_falls_back(self):
        with patch(f'{MODULE}._find_logging_config', return_value=Path('logging.ini')), \
                patch(f'{MODULE}.logging.config.fileConfig', side_effect=KeyError('formatters')), \
                patch(f'{MODULE}.logging.basicConfig') as basic_config, \
                patch('sys.stderr', new_callable=io.StringIO):
            log_config.bootstrap_logging(force=True)

        basic_config.assert_called_once()

    def test_second_call_is_noop(self):
        with patch(f'{MODULE}._find_logging_config', return_value=None), \
                patch(f'{MODULE}.logging.basicConfig') as basic_config:
            log_config.bootstrap_logging(force=True)
            log_config.bootstrap_logging()

        basic_config.assert_called_once()

    def test_get_logger_returns_named_logger(self):
        logger = log_config.get_logger('jira_cloud_client.tests')
        self.assertEqual(logger.name, 'jira_cloud_client.tests')
