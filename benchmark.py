import numpy as np
from tandem_suffix_package import build
from tandem_suffix_package.logger import setup_logger
import time
from typing import List, Tuple
import pandas as pd
import matplotlib.pyplot as plt

def generate_random_texts(n: int, length: int, alphabet: str = "AB") -> List[str]:
    """Generate n random texts of given length over alphabet"""
    return [''.join(np.random.choice(list(alphabet), length)) for _ in range(n)]

def run_benchmark(n_texts: int, text_length: int, pattern: str) -> Tuple[float, float, int]:
    """Build trees and run one pattern report per tree; return build time, query time and tandem runs found"""
    texts = generate_random_texts(n_texts, text_length)

    start_time = time.perf_counter()
    trees = [build(text) for text in texts]
    build_time = time.perf_counter() - start_time

    start_time = time.perf_counter()
    tandem_runs = 0
    for tree in trees:
        tandem_runs += len(tree.analyze(pattern).tandem_repeats)
    query_time = time.perf_counter() - start_time

    for tree in trees:
        tree.release()
    return build_time, query_time, tandem_runs

def main():
    setup_logger(verbose=True)

    text_lengths = [100, 1_000, 10_000]
    n_texts_list = [10, 50]
    pattern = "AB"

    results = []

    try:
        for n_texts in n_texts_list:
            for text_length in text_lengths:
                print(f"Testing: {n_texts} texts of length {text_length}")
                build_time, query_time, tandem_runs = run_benchmark(n_texts, text_length, pattern)
                results.append({
                    'n_texts': n_texts,
                    'text_length': text_length,
                    'build_time': build_time,
                    'query_time': query_time,
                    'tandem_runs': tandem_runs,
                    'bytes_per_second': n_texts * text_length / build_time,
                    'us_per_byte': build_time / (n_texts * text_length) * 1e6,
                })

        df = pd.DataFrame(results)
        df.to_csv('benchmark_results.csv', index=False)

        print("\nBenchmark Summary:")
        print("=================")
        for n_texts in n_texts_list:
            data = df[df['n_texts'] == n_texts]
            print(f"\nConfiguration: {n_texts} texts")
            for _, row in data.iterrows():
                print(f"  length {row['text_length']:>6}: build {row['build_time']:.3f}s "
                      f"({row['us_per_byte']:.2f} us/byte), query {row['query_time']:.4f}s, "
                      f"{row['tandem_runs']} tandem runs")

        plt.figure(figsize=(12, 6))

        # Construction cost per byte should stay flat if the build is linear
        plt.subplot(1, 2, 1)
        for n_texts in n_texts_list:
            data = df[df['n_texts'] == n_texts]
            plt.plot(data['text_length'], data['us_per_byte'], marker='o', label=f'{n_texts} texts')
        plt.xscale('log')
        plt.xlabel('Text Length')
        plt.ylabel('Build Time per Byte (us)')
        plt.title('Construction Cost vs Text Length')
        plt.grid(True, alpha=0.3)
        plt.legend()

        plt.subplot(1, 2, 2)
        for n_texts in n_texts_list:
            data = df[df['n_texts'] == n_texts]
            plt.plot(data['text_length'], data['query_time'], marker='o', label=f'{n_texts} texts')
        plt.xscale('log')
        plt.xlabel('Text Length')
        plt.ylabel('Query Time (s)')
        plt.title(f"Pattern '{pattern}' Report Time")
        plt.grid(True, alpha=0.3)
        plt.legend()

        plt.tight_layout()
        plt.savefig('benchmark_results.png', dpi=300, bbox_inches='tight')
        plt.close()

    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user.")

if __name__ == '__main__':
    main()
