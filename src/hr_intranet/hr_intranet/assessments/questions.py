"""Question bank for the pre-employment test.

q1..q20 are interview questions graded by expected keywords, q21..q40 are
short coding tasks graded by regular expressions over the submitted snippet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Pattern, Sequence, Tuple

from ..core.enums import QuestionKind


@dataclass(frozen=True)
class Question:
    key: str
    kind: QuestionKind
    prompt: str
    keywords: Tuple[str, ...] = ()
    patterns: Tuple[Pattern[str], ...] = field(default_factory=tuple)


def _interview(n: int, prompt: str, *keywords: str) -> Question:
    return Question(key=f"q{n}", kind=QuestionKind.INTERVIEW, prompt=prompt, keywords=tuple(k.lower() for k in keywords))


def _code(n: int, prompt: str, *patterns: str) -> Question:
    return Question(key=f"q{n}", kind=QuestionKind.CODE, prompt=prompt, patterns=tuple(re.compile(p) for p in patterns))


QUESTIONS: Sequence[Question] = (
    _interview(1, "Trình bày các vùng nhớ của JVM.", "heap", "stack", "garbage collector", "method area", "young generation"),
    _interview(2, "Bốn tính chất của lập trình hướng đối tượng là gì?", "encapsulation", "inheritance", "polymorphism", "abstraction"),
    _interview(3, "So sánh == và equals() trong Java.", "reference", "value", "equals", "hashcode"),
    _interview(4, "HashMap hoạt động bên trong như thế nào?", "hash", "bucket", "collision", "load factor", "equals"),
    _interview(5, "Phân biệt checked và unchecked exception.", "checked", "unchecked", "runtimeexception", "throws", "compile"),
    _interview(6, "Phân biệt thread và process.", "thread", "process", "memory", "context switch"),
    _interview(7, "Deadlock là gì và cách phòng tránh?", "deadlock", "lock", "order", "timeout"),
    _interview(8, "Các nguyên tắc của REST API.", "stateless", "resource", "http", "get", "post"),
    _interview(9, "Index trong cơ sở dữ liệu giúp gì?", "index", "b-tree", "query", "scan"),
    _interview(10, "Tính chất ACID của transaction.", "atomicity", "consistency", "isolation", "durability"),
    _interview(11, "So sánh interface và abstract class.", "interface", "abstract", "implements", "extends", "default"),
    _interview(12, "Vì sao String trong Java là immutable?", "immutable", "string pool", "thread-safe", "security"),
    _interview(
        13,
        "Trình bày nguyên lý SOLID.",
        "single responsibility",
        "open",
        "liskov",
        "interface segregation",
        "dependency inversion",
    ),
    _interview(14, "Khác nhau giữa git merge và git rebase.", "merge", "rebase", "history", "conflict"),
    _interview(15, "Unit test tốt cần những gì?", "unit test", "mock", "assert", "coverage"),
    _interview(16, "So sánh ArrayList và LinkedList.", "array", "linked", "random access", "insert"),
    _interview(17, "Phân biệt final, finally và finalize.", "final", "finally", "finalize"),
    _interview(18, "Cài đặt Singleton cần lưu ý gì?", "singleton", "instance", "private constructor", "static"),
    _interview(19, "Ý nghĩa các HTTP status code thường gặp.", "200", "401", "404", "500"),
    _interview(20, "Các nghi thức chính trong Scrum.", "sprint", "backlog", "standup", "retrospective"),
    _code(21, "Khai báo một danh sách chuỗi và thêm một phần tử.", r"new\s+ArrayList", r"\bList\s*<\s*String\s*>", r"\.add\s*\("),
    _code(22, "Đảo ngược một chuỗi.", r"StringBuilder", r"\.reverse\s*\(\s*\)", r"charAt\s*\("),
    _code(23, "Kiểm tra chuỗi đối xứng (palindrome).", r"charAt\s*\(", r"for\s*\(|while\s*\(", r"return\s+(true|false)"),
    _code(24, "Tính giai thừa bằng đệ quy.", r"return\s+1\s*;", r"\*\s*\w+\s*\(", r"if\s*\("),
    _code(25, "In dãy Fibonacci n số đầu.", r"for\s*\(|while\s*\(", r"\w+\s*\+\s*\w+", r"System\.out\.print"),
    _code(26, "Tìm phần tử lớn nhất trong mảng.", r"Math\.max|>\s*max|max\s*<", r"for\s*\(", r"\[\s*\w+\s*\]"),
    _code(27, "Đếm tần suất từ bằng HashMap.", r"HashMap|Map\s*<", r"getOrDefault|containsKey|merge\s*\(", r"\.put\s*\("),
    _code(28, "Đọc nội dung một file văn bản.", r"BufferedReader|Files\.readAllLines|Scanner", r"try\s*[({]", r"readLine|lines\s*\("),
    _code(29, "Tạo một custom exception.", r"extends\s+(Runtime)?Exception", r"super\s*\(", r"throw\s+new"),
    _code(30, "Khai báo interface và lớp cài đặt.", r"interface\s+\w+", r"implements\s+\w+", r"@Override"),
    _code(31, "Tạo và chạy một thread.", r"new\s+Thread", r"Runnable|->", r"\.start\s*\(\s*\)"),
    _code(32, "Sắp xếp danh sách theo comparator.", r"Collections\.sort|\.sort\s*\(", r"Comparator|compareTo", r"\.comparing"),
    _code(33, "Lọc danh sách bằng Stream API.", r"\.stream\s*\(\s*\)", r"\.filter\s*\(", r"\.collect\s*\(|\.toList\s*\("),
    _code(34, "Cài đặt Singleton.", r"private\s+static", r"private\s+\w+\s*\(\s*\)", r"getInstance"),
    _code(35, "Viết câu SQL lấy nhân viên kèm phòng ban.", r"(?i)\bselect\b", r"(?i)\bjoin\b", r"(?i)\bwhere\b|\bon\b"),
    _code(36, "Đếm số nhân viên theo phòng ban bằng SQL.", r"(?i)count\s*\(", r"(?i)group\s+by", r"(?i)having|order\s+by"),
    _code(37, "Xử lý ngoại lệ với try-catch-finally.", r"try\s*\{", r"catch\s*\(", r"finally"),
    _code(38, "Hoán đổi hai số không dùng biến tạm.", r"\w+\s*=\s*\w+\s*\+\s*\w+", r"\w+\s*=\s*\w+\s*-\s*\w+", r"\^"),
    _code(39, "Loại bỏ phần tử trùng bằng Set.", r"HashSet|Set\s*<", r"new\s+\w*Set", r"\.add\s*\(|addAll"),
    _code(40, "Tìm kiếm nhị phân trên mảng đã sắp xếp.", r"\b(low|left)\b", r"\bmid\b", r"while\s*\("),
)
