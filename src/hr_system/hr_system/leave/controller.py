from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_actor, json_body, login_required
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave", methods=["POST"], endpoint="leave_submit")
    @login_required
    def leave_submit():
        data = json_body()
        missing = [k for k in ("leave_type", "start_date", "end_date", "reason") if not data.get(k)]
        if missing:
            raise ValidationError("Vui lòng nhập đầy đủ thông tin: " + ", ".join(missing))

        leave = container.leave_service.submit(
            actor=current_actor(),
            leave_type=data["leave_type"],
            start_date=parse_iso_date(data["start_date"]),
            end_date=parse_iso_date(data["end_date"]),
            reason=data["reason"],
        )
        return jsonify({"success": True, "message": "Đã gửi đơn nghỉ phép", "leave": leave.to_dict()}), 201

    @app.route("/api/leave", methods=["GET"], endpoint="leave_list")
    @login_required
    def leave_list():
        leaves = container.leave_query_service.list_requests(
            actor=current_actor(),
            status=request.args.get("status") or None,
            leave_type=request.args.get("leave_type") or None,
        )
        return jsonify([r.to_dict() for r in leaves])

    @app.route("/api/leave/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def leave_balance():
        return jsonify(container.leave_query_service.balance_summary(actor=current_actor()))

    @app.route("/api/leave/pending", methods=["GET"], endpoint="leave_pending")
    @login_required
    def leave_pending():
        leaves = container.leave_query_service.list_pending(actor=current_actor())
        return jsonify([r.to_dict() for r in leaves])

    @app.route("/api/leave/dashboard", methods=["GET"], endpoint="leave_dashboard")
    @login_required
    def leave_dashboard():
        return jsonify(container.leave_query_service.dashboard(actor=current_actor()).to_dict())

    @app.route("/api/leave/<int:request_id>", methods=["GET"], endpoint="leave_detail")
    @login_required
    def leave_detail(request_id: int):
        leave = container.leave_query_service.get_request(actor=current_actor(), request_id=request_id)
        return jsonify(leave.to_dict())

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    @login_required
    def leave_approve(request_id: int):
        leave = container.leave_service.approve(actor=current_actor(), request_id=request_id)
        return jsonify({"success": True, "message": "Đã duyệt đơn nghỉ phép", "leave": leave.to_dict()})

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    @login_required
    def leave_reject(request_id: int):
        data = json_body()
        leave = container.leave_service.reject(
            actor=current_actor(),
            request_id=request_id,
            reason=str(data.get("rejection_reason") or ""),
        )
        return jsonify({"success": True, "message": "Đã từ chối đơn nghỉ phép", "leave": leave.to_dict()})

    @app.route("/api/leave/<int:request_id>", methods=["DELETE"], endpoint="leave_cancel")
    @login_required
    def leave_cancel(request_id: int):
        leave = container.leave_service.cancel(actor=current_actor(), request_id=request_id)
        return jsonify({"success": True, "message": "Đã hủy đơn nghỉ phép", "leave": leave.to_dict()})
