"""
Tests for scheduling/settings.py

Tests decoding of stored work days / selected calendars and settings
records, including degradation of malformed values.
"""

import unittest

from auto_scheduling.scheduling.settings import (
	DEFAULT_WORK_DAYS,
	AutoScheduleSettings,
	parse_selected_calendars,
	parse_work_days,
)


SETTINGS_LOGGER = "auto_scheduling.scheduling.settings"


class TestParseWorkDays(unittest.TestCase):
	"""Tests for work day decoding."""

	def test_json_array(self):
		"""Test decoding a JSON array string."""
		self.assertEqual(parse_work_days("[1, 2, 3]"), [1, 2, 3])

	def test_comma_separated(self):
		"""Test decoding a comma-separated string."""
		self.assertEqual(parse_work_days("1, 2,3"), [1, 2, 3])

	def test_list_is_sorted_and_deduplicated(self):
		"""Test that decoded lists are sorted without duplicates."""
		self.assertEqual(parse_work_days([5, 1, 1]), [1, 5])

	def test_empty_values(self):
		"""Test that None and empty strings decode to no days."""
		self.assertEqual(parse_work_days(None), [])
		self.assertEqual(parse_work_days(""), [])
		self.assertEqual(parse_work_days("[]"), [])

	def test_malformed_json_degrades_to_empty(self):
		"""Test that broken JSON yields no work days and logs a warning."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_work_days("[1, 2"), [])

	def test_non_numeric_degrades_to_empty(self):
		"""Test that a non-numeric entry invalidates the whole value."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_work_days("monday,tuesday"), [])

	def test_out_of_range_degrades_to_empty(self):
		"""Test that a day outside 0-6 invalidates the whole value."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_work_days([1, 7]), [])

	def test_json_object_degrades_to_empty(self):
		"""Test that a JSON value that is not a list is rejected."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_work_days('{"days": [1]}'), [])

	def test_unsupported_type_degrades_to_empty(self):
		"""Test that an unsupported encoding is rejected."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_work_days(12), [])


class TestParseSelectedCalendars(unittest.TestCase):
	"""Tests for calendar selection decoding."""

	def test_json_array(self):
		"""Test decoding a JSON array of calendar ids."""
		self.assertEqual(parse_selected_calendars('["work", "personal"]'), ["work", "personal"])

	def test_duplicates_and_blanks_removed(self):
		"""Test that blank and repeated ids are dropped."""
		self.assertEqual(parse_selected_calendars(["work", " ", "work", "team"]), ["work", "team"])

	def test_empty(self):
		"""Test that empty selections decode to []."""
		self.assertEqual(parse_selected_calendars(""), [])
		self.assertEqual(parse_selected_calendars(None), [])

	def test_nested_values_degrade_to_empty(self):
		"""Test that objects inside the array invalidate the selection."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertEqual(parse_selected_calendars('[{"id": "work"}]'), [])


class TestAutoScheduleSettings(unittest.TestCase):
	"""Tests for the settings record."""

	def test_defaults(self):
		"""Test default work hours and days."""
		settings = AutoScheduleSettings()
		self.assertEqual(settings.work_hour_start, 9)
		self.assertEqual(settings.work_hour_end, 17)
		self.assertEqual(settings.parsed_work_days(), DEFAULT_WORK_DAYS)
		self.assertEqual(settings.parsed_selected_calendars(), [])
		self.assertTrue(settings.is_schedulable())

	def test_from_record_camel_case(self):
		"""Test building settings from a stored camelCase record."""
		settings = AutoScheduleSettings.from_record({
			"workHourStart": 8,
			"workHourEnd": "18",
			"workDays": "[1,2]",
			"bufferMinutes": -5,
			"selectedCalendars": '["work"]',
		})
		self.assertEqual(settings.work_hour_start, 8)
		self.assertEqual(settings.work_hour_end, 18)
		self.assertEqual(settings.parsed_work_days(), [1, 2])
		self.assertEqual(settings.buffer_minutes, 0)
		self.assertEqual(settings.parsed_selected_calendars(), ["work"])

	def test_from_record_missing_keys_use_defaults(self):
		"""Test that missing keys fall back to defaults."""
		settings = AutoScheduleSettings.from_record({"buffer_minutes": 10})
		self.assertEqual(settings.work_hour_start, 9)
		self.assertEqual(settings.work_hour_end, 17)
		self.assertEqual(settings.buffer_minutes, 10)

	def test_from_record_invalid_integer(self):
		"""Test that a non-numeric hour falls back to its default."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			settings = AutoScheduleSettings.from_record({"workHourStart": "nine"})
		self.assertEqual(settings.work_hour_start, 9)

	def test_from_record_out_of_range_hour(self):
		"""Test that an hour outside 0-24 is logged and leaves the settings unschedulable."""
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			settings = AutoScheduleSettings.from_record({"workHourStart": -1, "workHourEnd": 17})
		self.assertFalse(settings.is_schedulable())

	def test_not_schedulable_when_hours_out_of_range(self):
		"""Test the 0-24 bounds on work hours."""
		self.assertFalse(AutoScheduleSettings(work_hour_start=24, work_hour_end=25).is_schedulable())
		self.assertFalse(AutoScheduleSettings(work_hour_start=-1, work_hour_end=17).is_schedulable())
		self.assertTrue(AutoScheduleSettings(work_hour_start=0, work_hour_end=24).is_schedulable())

	def test_not_schedulable_with_negative_buffer(self):
		"""Test that a negative buffer built directly is rejected."""
		self.assertFalse(AutoScheduleSettings(buffer_minutes=-5).is_schedulable())
		self.assertTrue(AutoScheduleSettings(buffer_minutes=0).is_schedulable())

	def test_not_schedulable_when_hours_inverted(self):
		"""Test that start >= end cannot produce slots."""
		self.assertFalse(AutoScheduleSettings(work_hour_start=17, work_hour_end=9).is_schedulable())
		self.assertFalse(AutoScheduleSettings(work_hour_start=9, work_hour_end=9).is_schedulable())

	def test_not_schedulable_without_work_days(self):
		"""Test that an empty or malformed work day set cannot produce slots."""
		self.assertFalse(AutoScheduleSettings(work_days=[]).is_schedulable())
		with self.assertLogs(SETTINGS_LOGGER, level="WARNING"):
			self.assertFalse(AutoScheduleSettings(work_days="[oops").is_schedulable())


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
