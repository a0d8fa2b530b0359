"""Pure domain rules: calendar arithmetic, month commands and payroll."""
