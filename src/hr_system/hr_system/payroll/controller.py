from __future__ import annotations

from flask import Flask, jsonify, send_file

from ..common.http import current_actor, json_body, login_required
from ..container import Container
from .model import SalaryComponents


def register(app: Flask, container: Container) -> None:
    @app.route("/api/salary", methods=["POST"], endpoint="salary_create")
    @login_required
    def salary_create():
        data = json_body()
        record = container.payroll_service.create_salary_record(
            actor=current_actor(),
            emp_code=data.get("emp_code"),
            month=data.get("month"),
            year=data.get("year"),
            amounts={k: data[k] for k in SalaryComponents.field_names() if k in data},
        )
        return jsonify(record.to_dict()), 201

    @app.route("/api/salary", methods=["GET"], endpoint="salary_list")
    @login_required
    def salary_list():
        records = container.payroll_service.list_salary_records(actor=current_actor())
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/salary/<int:salary_id>", methods=["GET"], endpoint="salary_detail")
    @login_required
    def salary_detail(salary_id: int):
        record = container.payroll_service.get_salary_record(actor=current_actor(), salary_id=salary_id)
        return jsonify(record.to_dict())

    @app.route("/api/salary/<int:salary_id>", methods=["PUT"], endpoint="salary_update")
    @login_required
    def salary_update(salary_id: int):
        record = container.payroll_service.update_salary_record(
            actor=current_actor(),
            salary_id=salary_id,
            amounts=json_body(),
        )
        return jsonify(record.to_dict())

    @app.route("/api/salary/<int:salary_id>", methods=["DELETE"], endpoint="salary_delete")
    @login_required
    def salary_delete(salary_id: int):
        container.payroll_service.delete_salary_record(actor=current_actor(), salary_id=salary_id)
        return jsonify({"success": True, "message": "Đã xóa bảng lương"})

    @app.route("/api/payslip/generate/<int:salary_id>", methods=["POST"], endpoint="payslip_generate")
    @login_required
    def payslip_generate(salary_id: int):
        record = container.payroll_service.generate_payslip(actor=current_actor(), salary_id=salary_id)
        return jsonify({
            "success": True,
            "message": "Đã tạo phiếu lương",
            "payslip_url": record.payslip_path,
            "salary": record.to_dict(),
        })

    @app.route("/api/payslip/<int:salary_id>", methods=["GET"], endpoint="payslip_info")
    @login_required
    def payslip_info(salary_id: int):
        record, employee = container.payroll_service.payslip_info(actor=current_actor(), salary_id=salary_id)
        data = record.to_dict()
        data["employee"] = {
            "emp_code": record.emp_code,
            "full_name": employee.full_name if employee else "N/A",
            "email": employee.email if employee else "N/A",
        }
        return jsonify(data)

    @app.route("/api/payslip/download/<int:salary_id>", methods=["GET"], endpoint="payslip_download")
    @login_required
    def payslip_download(salary_id: int):
        path = container.payroll_service.download_payslip(actor=current_actor(), salary_id=salary_id)
        return send_file(path, as_attachment=True, download_name=path.name)
