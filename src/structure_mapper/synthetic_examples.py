"""Template-generated usage examples for classes and methods without real usages."""

from typing import List, Optional, Sequence

from .models import ClassModel, MethodModel, Parameter, RolePattern, SyntheticExample


def instance_name(class_name: str) -> str:
    """``UserService`` -> ``userService``."""
    return class_name[:1].lower() + class_name[1:]


class SyntheticExampleGenerator:
    """Generates deterministic example snippets from a class's structure."""

    def generate_method_examples(self, class_model: ClassModel, method: MethodModel,
                                 role_patterns: Sequence[RolePattern] = ()) -> List[SyntheticExample]:
        """
        Examples for calling ``method``.

        Always yields a basic call; adds a role-specific example for
        controllers, services and repositories, and an error-handling example
        for methods taking more than two parameters.
        """
        examples = [self._basic_method_example(class_model, method)]

        if role_patterns:
            role_example = self._role_method_example(class_model, method, role_patterns[0])
            if role_example:
                examples.append(role_example)

        if len(method.parameters) > 2:
            examples.append(self._error_handling_example(class_model, method))

        return examples

    def generate_class_usage_examples(self, class_model: ClassModel,
                                      role_patterns: Sequence[RolePattern] = ()) -> List[SyntheticExample]:
        if role_patterns:
            return [self._injection_example(class_model, role_patterns[0])]
        return [self._constructor_example(class_model)]

    def _basic_method_example(self, class_model: ClassModel, method: MethodModel) -> SyntheticExample:
        instance = instance_name(class_model.name)
        arguments = self.generate_argument_values(method.parameters)
        call = f"{instance}.{method.name}({', '.join(arguments)});"

        if method.return_type in ("void", ""):
            code_snippet = call
            context = f"// Call {method.name} to perform the operation"
        else:
            code_snippet = f"{method.return_type} {self._result_name(method.return_type)} = {call}"
            context = f"// Get {method.return_type} result from {method.name}"

        return SyntheticExample(
            method_name=method.name,
            code_snippet=code_snippet,
            description=f"Basic usage of {method.name} method",
            context=context,
            parameters=arguments,
        )

    def _role_method_example(self, class_model: ClassModel, method: MethodModel,
                             role_pattern: RolePattern) -> Optional[SyntheticExample]:
        instance = instance_name(class_model.name)
        arguments = self.generate_argument_values(method.parameters)
        call = f"{instance}.{method.name}({', '.join(arguments)});"

        if role_pattern.type in ("CONTROLLER", "REST_CONTROLLER"):
            if method.endpoint is None:
                return None
            code_snippet = (f"// HTTP {method.endpoint.http_method} request handler\n"
                            f"{method.return_type} response = {call}")
            context = f"// This method handles HTTP requests and returns {method.return_type}"
        elif role_pattern.type == "SERVICE":
            code_snippet = f"// Business logic execution\n{method.return_type} result = {call}"
            context = "// Service layer method for business operations"
        elif role_pattern.type == "REPOSITORY":
            code_snippet = f"// Data access operation\n{method.return_type} data = {call}"
            context = "// Repository method for database operations"
        else:
            return None

        return SyntheticExample(
            method_name=method.name,
            code_snippet=code_snippet,
            description=f"{role_pattern.type} usage of {method.name}",
            context=context,
            parameters=arguments,
        )

    def _error_handling_example(self, class_model: ClassModel, method: MethodModel) -> SyntheticExample:
        instance = instance_name(class_model.name)
        arguments = self.generate_argument_values(method.parameters)
        assignment = f"{method.return_type} result = " if method.return_type not in ("void", "") else ""

        code_snippet = "\n".join([
            "try {",
            f"    {assignment}{instance}.{method.name}({', '.join(arguments)});",
            "    // Handle success case",
            "} catch (Exception e) {",
            f'    logger.error("Error calling {method.name}: " + e.getMessage());',
            "}",
        ])
        return SyntheticExample(
            method_name=method.name,
            code_snippet=code_snippet,
            description=f"Error handling example for {method.name}",
            context=f"// Proper error handling when calling {method.name}",
            parameters=arguments,
        )

    def _injection_example(self, class_model: ClassModel, role_pattern: RolePattern) -> SyntheticExample:
        instance = instance_name(class_model.name)
        code_snippet = "\n".join([
            "@Autowired",
            f"private {class_model.name} {instance};",
        ])
        return SyntheticExample(
            method_name="class_injection",
            code_snippet=code_snippet,
            description=f"Dependency injection of {class_model.name}",
            context=f"// {role_pattern.description}",
        )

    def _constructor_example(self, class_model: ClassModel) -> SyntheticExample:
        instance = instance_name(class_model.name)
        return SyntheticExample(
            method_name="constructor",
            code_snippet=f"{class_model.name} {instance} = new {class_model.name}();",
            description=f"Creating instance of {class_model.name}",
            context="// Standard object instantiation",
        )

    def generate_argument_values(self, parameters: Sequence[Parameter]) -> List[str]:
        return [self.value_for_type(p.type, p.name) for p in parameters]

    def value_for_type(self, type_name: str, parameter_name: str) -> str:
        """A plausible literal for a parameter, guided by its type and name."""
        lower_type = type_name.lower()
        if lower_type == "string":
            return f'"{self._string_value(parameter_name)}"'
        if lower_type in ("int", "integer"):
            return self._int_value(parameter_name)
        if lower_type == "long":
            return self._int_value(parameter_name) + "L"
        if lower_type == "boolean":
            return "true"
        if lower_type in ("double", "float"):
            return "0.0"
        if lower_type == "date":
            return "new Date()"
        if lower_type in ("list", "arraylist"):
            return "Arrays.asList()"
        return instance_name(type_name)

    def _string_value(self, parameter_name: str) -> str:
        lower_name = parameter_name.lower()
        hints = [
            ("name", "John Doe"),
            ("email", "user@example.com"),
            ("id", "12345"),
            ("url", "https://example.com"),
            ("path", "/api/users"),
            ("message", "Hello World"),
        ]
        for hint, value in hints:
            if hint in lower_name:
                return value
        return "example"

    def _int_value(self, parameter_name: str) -> str:
        lower_name = parameter_name.lower()
        for hint, value in (("id", "1"), ("count", "10"), ("size", "100"), ("page", "0")):
            if hint in lower_name:
                return value
        return "1"

    def _result_name(self, return_type: str) -> str:
        lower_type = return_type.lower()
        for hint, name in (("list", "items"), ("response", "response"), ("user", "user")):
            if hint in lower_type:
                return name
        return "result"
