"""
Views for employees and salaries.

API Endpoints:
- /api/employees/ - List/create employees (multipart with documents)
- /api/employees/{id}/ - Retrieve/update/delete an employee
- /api/employees/drop-down/ - Employees without a login
- /api/employees/available-for-payment/?month=YYYY-MM - Employees not yet paid
- /api/salaries/ - List/create salary records
- /api/salaries/{id}/ - Retrieve/update/delete a salary record
"""

import logging
import re

from rest_framework import generics, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import HasAppPermission
from audit.services import AuditLogger

from .models import Employee, Salary
from .serializers import (
    EmployeeOptionSerializer,
    EmployeePaymentOptionSerializer,
    EmployeeSerializer,
    SalarySerializer,
)
from .services import EmployeeConflictError, EmployeeService

logger = logging.getLogger(__name__)

SALARY_MONTH_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


# =============================================================================
# EMPLOYEES
# =============================================================================

class EmployeeListCreateView(generics.ListCreateAPIView):
    """
    GET /api/employees/
    POST /api/employees/
    """
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'employees.view'
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    filterset_fields = ['department', 'designation']
    search_fields = ['full_name', 'employee_id', 'mobile', 'email']
    ordering_fields = ['full_name', 'doj', 'created_at']

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            employee = EmployeeService.create_employee(serializer.validated_data)
        except EmployeeConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        AuditLogger.from_request(request).log(
            module='Employees',
            action='CREATE',
            record_id=employee.id,
            new_values={
                'employee_id': employee.employee_id,
                'full_name': employee.full_name,
                'designation': employee.designation,
                'department': employee.department,
            },
            label=f"Employee created: {employee.employee_id}",
        )
        return Response(self.get_serializer(employee).data, status=status.HTTP_201_CREATED)


class EmployeeDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/employees/{id}/
    """
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer
    permission_classes = [HasAppPermission]
    required_permission = 'employees.view'
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def get_object(self):
        return Employee.objects.filter(pk=self.kwargs['pk']).first()

    def retrieve(self, request, *args, **kwargs):
        employee = self.get_object()
        if employee is None:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(employee).data)

    def partial_update(self, request, *args, **kwargs):
        employee = self.get_object()
        if employee is None:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.get_serializer(employee, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        before = EmployeeOptionSerializer(employee).data
        try:
            employee = EmployeeService.update_employee(employee, serializer.validated_data)
        except EmployeeConflictError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        AuditLogger.from_request(request).log_change(
            module='Employees',
            record_id=employee.id,
            old_values=before,
            new_values=EmployeeOptionSerializer(employee).data,
            label=f"Employee updated: {employee.employee_id}",
        )
        return Response(self.get_serializer(employee).data)

    def destroy(self, request, *args, **kwargs):
        employee = self.get_object()
        if employee is None:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)

        snapshot = EmployeeOptionSerializer(employee).data
        record_id = employee.id
        code = EmployeeService.delete_employee(employee)
        AuditLogger.from_request(request).log(
            module='Employees',
            action='DELETE',
            record_id=record_id,
            old_values=snapshot,
            label=f"Employee deleted: {code}",
        )
        return Response({'message': 'Employee deleted successfully', 'employee_id': code})


class EmployeeDropDownView(generics.ListAPIView):
    """
    GET /api/employees/drop-down/

    Employees that do not have a login yet.
    """
    serializer_class = EmployeeOptionSerializer
    pagination_class = None

    def get_queryset(self):
        return Employee.objects.filter(user__isnull=True).order_by('-created_at')


class EmployeeAvailableForPaymentView(APIView):
    """
    GET /api/employees/available-for-payment/?month=YYYY-MM
    """
    permission_classes = [HasAppPermission]
    required_permission = 'payments.view'

    def get(self, request):
        month = (request.query_params.get('month') or '').strip()
        if not month:
            return Response({'error': 'month is required (YYYY-MM)'}, status=status.HTTP_400_BAD_REQUEST)
        if not SALARY_MONTH_RE.match(month):
            return Response(
                {'error': 'Invalid salary month format. Expected YYYY-MM'},
                status=status.HTTP_400_BAD_REQUEST
            )

        employees = Employee.objects.exclude(payments__salary_month=month).order_by('full_name')
        return Response(EmployeePaymentOptionSerializer(employees, many=True).data)


# =============================================================================
# SALARIES
# =============================================================================

class SalaryListCreateView(generics.ListCreateAPIView):
    """
    GET /api/salaries/
    POST /api/salaries/
    """
    queryset = Salary.objects.select_related('user').order_by('-created_at')
    serializer_class = SalarySerializer
    permission_classes = [HasAppPermission]
    required_permission = 'employees.view'
    filterset_fields = ['user']


class SalaryDetailView(APIView):
    """
    GET/PUT/DELETE /api/salaries/{id}/

    PUT updates only the fields sent.
    """
    permission_classes = [HasAppPermission]
    required_permission = 'employees.view'

    def get_salary(self, pk):
        return Salary.objects.select_related('user').filter(pk=pk).first()

    def get(self, request, pk):
        salary = self.get_salary(pk)
        if salary is None:
            return Response({'error': 'Salary record not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(SalarySerializer(salary).data)

    def put(self, request, pk):
        salary = self.get_salary(pk)
        if salary is None:
            return Response({'error': 'Salary record not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = SalarySerializer(salary, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request, pk):
        salary = self.get_salary(pk)
        if salary is None:
            return Response({'error': 'Salary record not found'}, status=status.HTTP_404_NOT_FOUND)

        salary.delete()
        return Response({'message': 'Salary record deleted successfully'})
