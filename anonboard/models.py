from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import UniqueConstraint, false
from . import db


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(db.Model):
    __tablename__ = "posts"
    id = db.Column(db.String(64), primary_key=True, default=new_id)
    board = db.Column(db.String(64), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(64), nullable=True)
    author_anon_id = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    hidden = db.Column(db.Boolean, nullable=False, default=False, index=True)
    report_count = db.Column(db.Integer, nullable=False, default=0)
    hidden_reason = db.Column(db.String(255), nullable=True)
    hidden_at = db.Column(db.DateTime(timezone=True), nullable=True)
    likes = db.Column(db.Integer, nullable=False, default=0)


class Comment(db.Model):
    __tablename__ = "comments"
    id = db.Column(db.String(64), primary_key=True, default=new_id)
    post_id = db.Column(db.String(64), db.ForeignKey("posts.id"), nullable=False, index=True)
    board = db.Column(db.String(64), nullable=True)
    content = db.Column(db.Text, nullable=False)
    author = db.Column(db.String(64), nullable=True)
    author_anon_id = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    hidden = db.Column(db.Boolean, nullable=False, default=False, index=True)
    report_count = db.Column(db.Integer, nullable=False, default=0)
    hidden_reason = db.Column(db.String(255), nullable=True)
    hidden_at = db.Column(db.DateTime(timezone=True), nullable=True)


class Report(db.Model):
    __tablename__ = "reports"
    id = db.Column(db.String(64), primary_key=True, default=new_id)
    target_type = db.Column(db.String(16), nullable=False)
    target_id = db.Column(db.String(64), nullable=False)
    board = db.Column(db.String(64), nullable=True)
    reason = db.Column(db.Text, nullable=True)
    reporter = db.Column(db.String(128), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    resolved = db.Column(db.Boolean, nullable=False, server_default=false())

    __table_args__ = (
        db.Index("ix_reports_target", "target_type", "target_id"),
    )


class ReportDedupe(db.Model):
    """One row per (target, reporter); the store rejects a second one."""
    __tablename__ = "report_dedupe"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    target_type = db.Column(db.String(16), nullable=False)
    target_id = db.Column(db.String(64), nullable=False)
    reporter = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("target_type", "target_id", "reporter", name="uix_report_target_reporter"),
    )


class TrendKeyword(db.Model):
    __tablename__ = "trend_keywords"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    board = db.Column(db.String(64), nullable=True, index=True)  # NULL: all boards
    keyword = db.Column(db.String(128), nullable=False)
    cnt = db.Column(db.Integer, nullable=False, default=0)
    computed_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)


class RisingKeyword(db.Model):
    __tablename__ = "rising_keywords"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    board = db.Column(db.String(64), nullable=True, index=True)  # NULL: all boards
    keyword = db.Column(db.String(128), nullable=False)
    recent_cnt = db.Column(db.Integer, nullable=False, default=0)
    prev_cnt = db.Column(db.Integer, nullable=False, default=0)
    delta = db.Column(db.Integer, nullable=False, default=0)
    ratio = db.Column(db.Float, nullable=True)
    score = db.Column(db.Float, nullable=False, default=0.0)
    computed_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
