"""Tests for the UnitParser class."""

from structure_mapper.models import Parameter
from structure_mapper.unit_parser import UnitParser

USER_SERVICE = """package com.example.service;

import java.util.List;
import java.util.*;
import static org.junit.Assert.assertEquals;
import com.example.repo.UserRepository;

/**
 * Service class for users.
 */
@Service
@Transactional(readOnly = true)
public class UserService extends BaseService implements Auditable, Serializable {

    @Autowired
    private UserRepository userRepository;

    @Qualifier("cache")
    @Autowired
    private CacheManager cacheManager;

    private static final int MAX_USERS = 100;

    public UserService(UserRepository userRepository) {
        this.userRepository = userRepository;
    }

    @Override
    public List<User> findAll() {
        List<User> users = userRepository.findAll();
        if (users.isEmpty()) {
            return loadDefaults();
        }
        return users;
    }

    public User findById(Long id, boolean strict) throws NotFoundException {
        for (User user : findAll()) {
            if (user.getId().equals(id)) {
                return user;
            }
        }
        throw new NotFoundException("missing");
    }

    private static List<User> loadDefaults() {
        return cacheManager.get("defaults");
    }
}
"""


class TestUnitParser:
    """Test parsing of a single source file."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = UnitParser()
        self.model = self.parser.parse_source("UserService.java", USER_SERVICE)

    def test_class_header(self):
        """Test the class name, package and supertypes."""
        assert self.model is not None
        assert self.model.name == "UserService"
        assert self.model.file_path == "UserService.java"
        assert self.model.package == "com.example.service"
        assert self.model.extends == "BaseService"
        assert self.model.implements == ["Auditable", "Serializable"]
        assert self.model.qualified_name == "com.example.service.UserService"

    def test_imports_keep_static_and_wildcard_forms(self):
        """Test static and wildcard imports are kept as written."""
        assert self.model.imports == [
            "java.util.List",
            "java.util.*",
            "static org.junit.Assert.assertEquals",
            "com.example.repo.UserRepository",
        ]

    def test_class_annotations_skip_javadoc_and_stop_at_code(self):
        """Test class annotations skip the javadoc block."""
        assert self.model.annotations == ["@Service", "@Transactional(readOnly = true)"]

    def test_methods(self):
        """Test method names, constructor and calls."""
        names = [m.name for m in self.model.methods]
        assert names == ["UserService", "findAll", "findById", "loadDefaults"]

        constructor = self.model.methods[0]
        assert constructor.return_type == ""
        assert constructor.visibility == "public"
        assert constructor.parameters == [Parameter(type="UserRepository", name="userRepository")]

        find_all = self.model.methods[1]
        assert find_all.return_type == "List<User>"
        assert find_all.annotations == ["@Override"]
        assert find_all.calls == {"findAll", "isEmpty", "loadDefaults"}

    def test_method_signature_details(self):
        """Test visibility, static flag and parameters."""
        find_by_id = self.model.methods[2]
        assert find_by_id.visibility == "public"
        assert find_by_id.is_static is False
        assert find_by_id.parameters == [
            Parameter(type="Long", name="id"),
            Parameter(type="boolean", name="strict"),
        ]
        assert find_by_id.calls == {"findAll", "getId", "equals", "NotFoundException"}

        load_defaults = self.model.methods[3]
        assert load_defaults.visibility == "private"
        assert load_defaults.is_static is True
        assert load_defaults.calls == {"get"}

    def test_fields_exclude_local_variables(self):
        """Test local variables are not fields."""
        assert [(f.name, f.type) for f in self.model.fields] == [
            ("userRepository", "UserRepository"),
            ("cacheManager", "CacheManager"),
            ("MAX_USERS", "int"),
        ]

    def test_field_annotations(self):
        """Test annotations collected above each field."""
        repository, cache, max_users = self.model.fields
        assert repository.annotations == ["@Autowired"]
        assert repository.visibility == "private"
        assert cache.annotations == ['@Qualifier("cache")', "@Autowired"]
        assert max_users.annotations == []
        assert max_users.is_static is True

    def test_dependencies(self):
        """Test the dependency set."""
        assert self.model.dependencies == {
            "Autowired",
            "Service",
            "UserRepository",
            "CacheManager",
            "List",
            "User",
            "java.util.List",
            "com.example.repo.UserRepository",
        }

    def test_role_output(self):
        """Test role classification on the parsed class."""
        assert self.model.is_controller is False
        assert self.model.endpoints == []
        assert [p.type for p in self.model.role_patterns] == ["SERVICE"]
        assert [(i.field_name, i.annotation) for i in self.model.injections] == [
            ("userRepository", "@Autowired"),
            ("cacheManager", '@Qualifier("cache")'),
        ]

    def test_parse_is_deterministic(self):
        """Test parsing the same source twice gives equal models."""
        again = UnitParser().parse_source("UserService.java", USER_SERVICE)
        assert again == self.model


class TestUnitParserEdgeCases:
    """Test absent results and graceful degradation."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = UnitParser()

    def test_interface_and_enum_are_not_units(self):
        """Test interfaces and enums yield no class model."""
        assert self.parser.parse_source("Repo.java", "package x;\npublic interface Repo { void save(); }") is None
        assert self.parser.parse_source("Color.java", "public enum Color { RED, GREEN }") is None

    def test_missing_package_is_empty(self):
        """Test a file without a package declaration."""
        model = self.parser.parse_source("P.java", "public class P {}")
        assert model.package == ""
        assert model.methods == []
        assert model.fields == []

    def test_only_first_class_is_recognized(self):
        """Test only the first class of a file is parsed."""
        content = "class First { }\nclass Second { }"
        assert self.parser.parse_source("Two.java", content).name == "First"

    def test_class_word_in_comment_is_ignored(self):
        """Test the word class inside a comment is ignored."""
        content = "// this class is generated\npublic final class Real { }"
        assert self.parser.parse_source("Real.java", content).name == "Real"

    def test_single_token_parameter_defaults_to_object(self):
        """Test a one-token parameter is typed as Object."""
        model = self.parser.parse_source("P.java", "class P { void m(String) { } }")
        assert model.methods[0].parameters == [Parameter(type="Object", name="String")]

    def test_parameter_annotations_are_dropped(self):
        """Test parameter annotations and final are dropped."""
        params = self.parser.parse_parameters("@RequestBody User user, final int count")
        assert params == [Parameter(type="User", name="user"), Parameter(type="int", name="count")]

    def test_unclosed_method_body_runs_to_end(self):
        """Test an unclosed body extends to the end of the file."""
        content = "public class Broken {\n    void run() {\n        call();\n"
        model = self.parser.parse_source("Broken.java", content)
        assert model.methods[0].calls == {"call"}

    def test_control_keywords_are_not_calls(self):
        """Test control-flow keywords are not recorded as calls."""
        content = """class Loop {
    void work() {
        if (a) { while (b) { doWork(); } }
        for (int i = 0; i < n; i++) { switch (i) { default: finish(i); } }
    }
}"""
        model = self.parser.parse_source("Loop.java", content)
        assert model.methods[0].calls == {"doWork", "finish"}

    def test_else_if_is_not_a_method(self):
        """Test else if is not taken for a method."""
        content = """class Branch {
    void pick(int x) {
        if (x > 1) {
            one();
        } else if (x > 0) {
            two();
        }
    }
}"""
        model = self.parser.parse_source("Branch.java", content)
        assert [m.name for m in model.methods] == ["pick"]

    def test_single_line_annotations(self):
        """Test annotations on the same line as the declaration."""
        content = "@Entity public class Item { @Id private Long id; @Column(name = \"n\") private String name; }"
        model = self.parser.parse_source("Item.java", content)
        assert model.annotations == ["@Entity"]
        assert [(f.name, f.annotations) for f in model.fields] == [
            ("id", ["@Id"]),
            ("name", ['@Column(name = "n")']),
        ]

    def test_generic_class_header(self):
        """Test a generic class header."""
        content = "public abstract class Box<T> extends Base<T> implements Comparable<Box<T>>, Cloneable {}"
        model = self.parser.parse_source("Box.java", content)
        assert model.name == "Box"
        assert model.extends == "Base"
        assert model.implements == ["Comparable", "Cloneable"]


class TestAnnotationScanning:
    """Test the reverse-line annotation scan."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = UnitParser()

    def test_accepts_annotations_blank_and_comment_lines(self):
        """Test annotations are collected across blank and comment lines."""
        content = "@A\n// comment\n\n@B(x = 1) @C\npublic void m() {}"
        position = content.index("public")
        assert self.parser.collect_annotations_before(content, position) == ["@A", "@B(x = 1)", "@C"]

    def test_stops_at_first_code_line(self):
        """Test the scan stops at the first code line."""
        content = "@Old\nint x;\n@New\nvoid m() {}"
        position = content.index("void")
        assert self.parser.collect_annotations_before(content, position) == ["@New"]

    def test_window_bounds_the_scan(self):
        """Test the window bounds how far back the scan reaches."""
        content = "@Autowired\n" + "\n" * 300 + "private Foo foo;"
        position = content.index("private")
        assert self.parser.collect_annotations_before(content, position, window=200) == []
        assert self.parser.collect_annotations_before(content, position) == ["@Autowired"]


class TestParseFile:
    """Test file-level error isolation."""

    def test_reads_through_sanitized_path(self, tmp_path):
        """Test reading through a sanitized path."""
        source = tmp_path / "A.java"
        source.write_text("class A { void m() { } }", encoding="utf-8")

        model = UnitParser().parse_file(str(source) + ".git")
        assert model.name == "A"
        assert model.file_path == str(source)

    def test_unreadable_file_returns_none(self, tmp_path):
        """Test an unreadable file yields None."""
        assert UnitParser().parse_file(str(tmp_path / "Missing.java")) is None

    def test_loader_failure_returns_none(self):
        """Test a failing loader yields None."""
        def failing_loader(path):
            raise RuntimeError("disk on fire")

        assert UnitParser(loader=failing_loader).parse_file("A.java") is None


class TestDeclarationBoundaries:
    """Test that declarations are matched on whole words outside comments."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = UnitParser()

    def test_inject_mocks_is_not_an_injection_marker(self):
        """A longer annotation name sharing a marker prefix adds no dependency."""
        content = "class OrderServiceTest {\n    @InjectMocks\n    private OrderService service;\n}"
        model = self.parser.parse_source("OrderServiceTest.java", content)

        assert model.dependencies == {"OrderService"}
        assert model.fields[0].annotations == ["@InjectMocks"]
        assert model.injections == []

    def test_package_private_constructor_under_annotation(self):
        """A constructor without modifiers keeps its full annotation and no return type."""
        content = "class C {\n    @Inject\n    C(B b) {\n        b.go();\n    }\n}"
        model = self.parser.parse_source("C.java", content)

        assert [(m.name, m.return_type, m.annotations) for m in model.methods] == [("C", "", ["@Inject"])]
        constructor = model.methods[0]
        assert constructor.visibility == "package"
        assert constructor.parameters == [Parameter(type="B", name="b")]
        assert constructor.calls == {"go"}
        assert model.dependencies == {"Inject", "B", "C"}

    def test_anonymous_subclass_is_not_a_constructor(self):
        """``new C() {`` inside a method body is not a declaration of C."""
        content = "class C {\n    static C make() {\n        return new C() {\n        };\n    }\n}"
        model = self.parser.parse_source("C.java", content)
        assert [m.name for m in model.methods] == ["make"]

    def test_url_in_same_line_annotation(self):
        """A ``//`` inside a string literal does not hide the declaration after it."""
        content = (
            "public class Docs {\n"
            '    @ApiOperation(notes = "see http://docs") public String foo() {\n'
            '        return "x";\n'
            "    }\n"
            "}"
        )
        model = self.parser.parse_source("Docs.java", content)

        assert [m.name for m in model.methods] == ["foo"]
        assert model.methods[0].annotations == ['@ApiOperation(notes = "see http://docs")']

    def test_url_in_class_annotation(self):
        """A class declared after an annotation holding a URL is still found."""
        content = '@Api(value = "http://x/api") public class Docs {}'
        model = self.parser.parse_source("Docs.java", content)

        assert model is not None
        assert model.name == "Docs"
        assert model.annotations == ['@Api(value = "http://x/api")']

    def test_commented_out_method_is_skipped(self):
        """A signature after a real line comment is still ignored."""
        content = "class K {\n    // public void old() {\n    public void now() {\n    }\n}"
        model = self.parser.parse_source("K.java", content)
        assert [m.name for m in model.methods] == ["now"]
