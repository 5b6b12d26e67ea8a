#!/usr/bin/env python3
"""
Transform Math Module
Quaternion/Euler conversion, exact transform composition and canonical
number formatting shared by the walker, pruner and exporter.

Rotations are (x, y, z, w) quaternions; Euler angles are XYZ order in radians,
matching three.js defaults.
"""

import math
from decimal import Context, Decimal, ROUND_HALF_UP

import numpy as np


def is_finite(values):
    """Check that every component is a finite number"""
    return bool(np.isfinite(np.asarray(values, dtype=float)).all())


def is_zero_vector(values):
    return all(v == 0.0 for v in values)


def is_unit_scale(values):
    return all(v == 1.0 for v in values)


def is_identity_rotation(q):
    return q[0] == 0.0 and q[1] == 0.0 and q[2] == 0.0


def euler_to_quaternion(euler):
    """Convert XYZ Euler angles (radians) to a quaternion"""
    x, y, z = euler
    c1, c2, c3 = math.cos(x / 2), math.cos(y / 2), math.cos(z / 2)
    s1, s2, s3 = math.sin(x / 2), math.sin(y / 2), math.sin(z / 2)
    return (
        s1 * c2 * c3 + c1 * s2 * s3,
        c1 * s2 * c3 - s1 * c2 * s3,
        c1 * c2 * s3 + s1 * s2 * c3,
        c1 * c2 * c3 - s1 * s2 * s3,
    )


def quaternion_to_matrix(q):
    """Rotation matrix (3x3) of a unit quaternion"""
    x, y, z, w = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


def quaternion_to_euler(q):
    """Decompose a quaternion into XYZ Euler angles (radians)"""
    m = quaternion_to_matrix(q)
    m13 = min(max(m[0][2], -1.0), 1.0)
    y = math.asin(m13)
    if abs(m13) < 0.9999999:
        x = math.atan2(-m[1][2], m[2][2])
        z = math.atan2(-m[0][1], m[0][0])
    else:
        # Gimbal lock
        x = math.atan2(m[2][1], m[1][1])
        z = 0.0
    return (x, y, z)


def matrix_to_quaternion(m):
    """Quaternion of a pure rotation matrix (3x3)"""
    m11, m12, m13 = m[0]
    m21, m22, m23 = m[1]
    m31, m32, m33 = m[2]
    trace = m11 + m22 + m33
    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        return ((m32 - m23) * s, (m13 - m31) * s, (m21 - m12) * s, 0.25 / s)
    if m11 > m22 and m11 > m33:
        s = 2.0 * math.sqrt(1.0 + m11 - m22 - m33)
        return (0.25 * s, (m12 + m21) / s, (m13 + m31) / s, (m32 - m23) / s)
    if m22 > m33:
        s = 2.0 * math.sqrt(1.0 + m22 - m11 - m33)
        return ((m12 + m21) / s, 0.25 * s, (m23 + m32) / s, (m13 - m31) / s)
    s = 2.0 * math.sqrt(1.0 + m33 - m11 - m22)
    return ((m13 + m31) / s, (m23 + m32) / s, 0.25 * s, (m21 - m12) / s)


def quaternion_multiply(a, b):
    """Hamilton product a * b (apply b, then a)"""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    )


def decompose_matrix(values):
    """Split a column-major 4x4 matrix (16 floats) into T, R, S

    Returns:
        tuple: (translation, quaternion, scale)
    """
    m = np.array(values, dtype=float).reshape(4, 4).T
    translation = tuple(float(v) for v in m[:3, 3])

    sx = np.linalg.norm(m[:3, 0])
    sy = np.linalg.norm(m[:3, 1])
    sz = np.linalg.norm(m[:3, 2])
    if np.linalg.det(m[:3, :3]) < 0:
        sx = -sx

    rotation = m[:3, :3].copy()
    for i, s in enumerate((sx, sy, sz)):
        if s != 0:
            rotation[:, i] /= s

    quaternion = tuple(float(v) for v in matrix_to_quaternion(rotation))
    return translation, quaternion, (float(sx), float(sy), float(sz))


def compose(parent, child):
    """Fold a parent transform into its only child

    Both arguments are (translation, rotation, scale) triples where None marks
    a default component. The result uses the same convention.

    Returns:
        tuple or None: Composed triple, or None when the product would carry
        shear and cannot be expressed as translation/rotation/scale.
    """
    pt, pq, ps = parent
    ct, cq, cs = child

    if pt is None and pq is None and ps is None:
        return child

    uniform = ps is None or (ps[0] == ps[1] == ps[2])
    if not uniform and cq is not None:
        return None

    if ct is None:
        t = pt
    else:
        v = np.array(ct, dtype=float)
        if ps is not None:
            v = v * np.array(ps, dtype=float)
        if pq is not None:
            v = quaternion_to_matrix(pq) @ v
        if pt is not None:
            v = v + np.array(pt, dtype=float)
        t = tuple(float(c) for c in v)

    if pq is None:
        q = cq
    elif cq is None:
        q = pq
    else:
        q = quaternion_multiply(pq, cq)

    if ps is None:
        s = cs
    elif cs is None:
        s = ps
    else:
        s = tuple(float(a * b) for a, b in zip(ps, cs))

    return sparse(t, q, s)


def sparse(translation, rotation, scale):
    """Replace exactly-default components by None"""
    if translation is not None and is_zero_vector(translation):
        translation = None
    if rotation is not None and is_identity_rotation(rotation):
        rotation = None
    if scale is not None and is_unit_scale(scale):
        scale = None
    return translation, rotation, scale


def format_number(value, precision):
    """Canonical numeric literal

    Rounds half away from zero on the shortest decimal representation of the
    float, strips trailing zeros and normalises negative zero.
    """
    quantum = Decimal(1).scaleb(-precision)
    # Wide enough for any finite double at the requested precision
    context = Context(prec=330 + precision)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    text = format(rounded, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        text = '0'
    return text


def rounds_to(values, default, precision):
    """True if every component formats the same as the default"""
    target = format_number(default, precision)
    return all(format_number(v, precision) == target for v in values)
