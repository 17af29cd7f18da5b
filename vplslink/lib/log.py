# Copyright (C) 2016, 2017, 2018, 2019 Cumulus Networks, Inc. all rights reserved
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License as
# published by the Free Software Foundation; version 2.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA
# 02110-1301, USA.
#
# https://www.gnu.org/licenses/gpl-2.0-standalone.html
#

import os
import sys
import traceback

import logging
import logging.handlers


root_logger = logging.getLogger()


class LogManager:
    """
    Owns the handlers of the root logger: stderr console handler from the
    start, syslog handler only when requested (--syslog or syslog=yes)
    """

    LOGGER_NAME = "vplslink"
    LOGGER_FORMAT = "%(levelname)s: %(message)s"

    SYSLOG_ADDRESS = "/dev/log"

    DEFAULT_LOGGING_LEVEL_NORMAL = logging.WARNING

    __instance = None

    @staticmethod
    def get_instance():
        if not LogManager.__instance:
            try:
                LogManager.__instance = LogManager()
            except Exception as e:
                sys.stderr.write("warning: vplslink.Log: %s\n" % str(e))
                traceback.print_exc()
        return LogManager.__instance

    def __init__(self):
        if LogManager.__instance:
            raise RuntimeError("Log: invalid access. Please use LogManager.get_instance()")
        else:
            LogManager.__instance = self

        self.__root_logger = logging.getLogger()

        self.__console_handler = logging.StreamHandler(sys.stderr)
        self.__console_handler.setFormatter(logging.Formatter(self.LOGGER_FORMAT))
        self.__console_handler.setLevel(self.DEFAULT_LOGGING_LEVEL_NORMAL)
        self.__root_logger.addHandler(self.__console_handler)

        self.__syslog_handler = self.__get_syslog_handler()

        # "warning: ..." rather than "WARNING: ..."
        for level in (logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG):
            logging.addLevelName(level, logging.getLevelName(level).lower())

    def __get_syslog_handler(self):
        if not os.path.exists(self.SYSLOG_ADDRESS):
            return None
        try:
            handler = logging.handlers.SysLogHandler(
                address=self.SYSLOG_ADDRESS,
                facility=logging.handlers.SysLogHandler.LOG_USER
            )
        except Exception as e:
            sys.stderr.write("warning: syslog: %s\n" % str(e))
            return None

        handler.setFormatter(logging.Formatter("%s: %s" % (self.LOGGER_NAME, self.LOGGER_FORMAT)))
        return handler

    def set_level(self, log_level):
        """
        Set the level of our handlers, the root logger is lowered if needed
        otherwise some messages might not go through
        """
        for handler in (self.__console_handler, self.__syslog_handler):
            if handler:
                handler.setLevel(log_level)

        if self.__root_logger.level > log_level or self.__root_logger.level == logging.NOTSET:
            self.__root_logger.setLevel(log_level)

    def enable_syslog(self):
        """ Add syslog handler to root logger """
        if self.__syslog_handler and self.__syslog_handler not in self.__root_logger.handlers:
            self.__root_logger.addHandler(self.__syslog_handler)

    def disable_syslog(self):
        """ Remove syslog handler from root logger """
        if self.__syslog_handler:
            self.__root_logger.removeHandler(self.__syslog_handler)

    def is_syslog_enabled(self):
        return self.__syslog_handler is not None and self.__syslog_handler in self.__root_logger.handlers

    def start_standalone_logging(self, args):
        if getattr(args, "syslog", False):
            self.enable_syslog()
        else:
            self.disable_syslog()

        if getattr(args, "debug", False):
            self.set_level(logging.DEBUG)
        elif getattr(args, "verbose", False):
            self.set_level(logging.INFO)
        else:
            self.set_level(self.DEFAULT_LOGGING_LEVEL_NORMAL)

    def write(self, msg):
        root_logger.info(msg)

    def root_logger(self):
        return self.__root_logger
