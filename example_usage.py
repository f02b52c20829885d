"""
示例脚本，演示如何使用 gsa_client 向检索设备发起查询，
并打印结果、推荐链接、动态导航与快照链接。

用法: python example_usage.py <host> <port> <检索词> [frontend] [collection]
"""

import asyncio
import sys

from gsa_client import CacheQueryBuilder, GSAClient, GSAQuery, OutputFormat, QueryTerm


async def main(host: str, port: int, terms: str, frontend: str = "default_frontend",
               collection: str = "default_collection"):
    """主函数，执行检索并输出解析结果。"""
    print("Starting example usage...")

    # 1. 创建客户端和查询
    client = GSAClient(host, port)
    query = GSAQuery()
    query.set_query_term(QueryTerm(terms))
    query.set_frontend(frontend)
    query.set_site_collections([collection])
    query.set_output_format(OutputFormat.XML_NO_DTD)
    query.set_max_results(10)

    print(f"Searching {client.build_url(query.to_query_string())}")

    # 2. 发起检索并解析
    response = await client.get_response(query)
    print(f"Found about {response.num_results} results in {response.search_time}s, "
          f"showing {response.start_index}-{response.end_index}.")

    # 3. 推荐链接
    for keymatch in response.keymatch_results:
        print(f"  [Keymatch] {keymatch.description}: {keymatch.url}")

    # 4. 自然结果及快照链接
    cache_builder = CacheQueryBuilder(client, query)
    for i, result in enumerate(response.results):
        print(f"  {i+1}. {result.title} ({result.url})")
        cache_url = cache_builder.get_cache_doc_url(result, highlighted=True)
        if cache_url:
            print(f"     Cached: {cache_url}")

    # 5. 拼写建议
    if response.spelling:
        for suggestion in response.spelling.suggestions:
            print(f"  Did you mean: {suggestion.text}")

    # 6. 动态导航
    for attribute in response.navigation_response.results:
        print(f"  [{attribute.label}]")
        for value in attribute.results:
            label = f"{value.low_range} - {value.high_range}" if attribute.is_range else value.value
            print(f"     {label} ({value.count})")

    print("\nExample usage completed successfully.")


# 确保此脚本作为主程序运行时才执行
if __name__ == "__main__":
    if len(sys.argv) < 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(sys.argv[1], int(sys.argv[2]), sys.argv[3], *sys.argv[4:6]))
