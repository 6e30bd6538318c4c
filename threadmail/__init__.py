"""Threadmail: folders, threads, templates and personalised compose over a relational store."""

__version__ = "0.1.0"
