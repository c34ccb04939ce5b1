"""路由模块."""
